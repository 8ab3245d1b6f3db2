"""src/mortcast/modeling/batch.py"""

from __future__ import annotations

import logging
from functools import partial
from multiprocessing import Pool
from typing import Any, Mapping

from mortcast.modeling.lee_carter import LeeCarterFit, fit_lee_carter
from mortcast.tables.series import MortalitySeries
from mortcast.tables.vital import GroupKey, VitalTable

logger = logging.getLogger(__name__)


def _as_series_map(data: VitalTable | Mapping[GroupKey, MortalitySeries]) -> dict[GroupKey, MortalitySeries]:
    if isinstance(data, VitalTable):
        return data.mortality_series()
    return dict(data)


def _fit_one(item: tuple[GroupKey, MortalitySeries], *, adjust: str) -> tuple[GroupKey, LeeCarterFit]:
    key, series = item
    return key, fit_lee_carter(series, adjust=adjust)


def fit_groups(
    data: VitalTable | Mapping[GroupKey, MortalitySeries],
    *,
    adjust: str = "dt",
    workers: int = 1,
) -> dict[GroupKey, LeeCarterFit]:
    """
    Fit one Lee-Carter model per population group.

    Groups are independent; with workers > 1 they are spread over a process
    pool. The first failing group raises and no partial result is returned.
    """
    series_map = _as_series_map(data)
    items = sorted(series_map.items(), key=lambda kv: tuple(str(v) for v in kv[0]))
    workers = max(1, int(workers))

    fn = partial(_fit_one, adjust=adjust)
    if workers > 1 and len(items) > 1:
        with Pool(min(workers, len(items))) as pool:
            results = pool.map(fn, items)
    else:
        results = [fn(item) for item in items]

    logger.info("Fitted %d Lee-Carter model(s) (adjust=%s, workers=%d)", len(results), adjust, workers)
    return dict(results)


def forecast_groups(
    fits: Mapping[GroupKey, LeeCarterFit],
    h: int,
    **kwargs: Any,
) -> dict[GroupKey, Any]:
    """Forecast every fitted group with the same horizon and options."""
    from mortcast.forecasting.lee_carter_forecast import forecast_lee_carter

    return {key: forecast_lee_carter(fit, h, **kwargs) for key, fit in fits.items()}
