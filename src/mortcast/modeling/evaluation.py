"""src/mortcast/modeling/evaluation.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np

from mortcast.errors import InvalidArgument
from mortcast.tables.series import MortalitySeries


def _to_valid_arrays(y_true: Iterable[float], y_pred: Iterable[float]) -> tuple[np.ndarray, np.ndarray]:
    yt = np.asarray(list(y_true), dtype=float)
    yp = np.asarray(list(y_pred), dtype=float)
    valid = np.isfinite(yt) & np.isfinite(yp)
    return yt[valid], yp[valid]


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    if y_true.size == 0:
        return float("nan")
    return float(np.sqrt(np.mean((y_true - y_pred) ** 2)))


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    if y_true.size == 0:
        return float("nan")
    return float(np.mean(np.abs(y_true - y_pred)))


def smape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    if y_true.size == 0:
        return float("nan")
    denom = (np.abs(y_true) + np.abs(y_pred)) / 2.0
    denom = np.where(denom == 0, 1.0, denom)
    return float(np.mean(np.abs(y_true - y_pred) / denom) * 100.0)


def coverage(y_true: Iterable[float], lower: Iterable[float], upper: Iterable[float]) -> float:
    """Share of finite observations inside [lower, upper]."""
    yt = np.asarray(list(y_true), dtype=float)
    lo = np.asarray(list(lower), dtype=float)
    hi = np.asarray(list(upper), dtype=float)
    valid = np.isfinite(yt) & np.isfinite(lo) & np.isfinite(hi)
    if not valid.any():
        return float("nan")
    inside = (yt[valid] >= lo[valid]) & (yt[valid] <= hi[valid])
    return float(inside.mean())


@dataclass(frozen=True)
class MetricPack:
    rmse: float
    mae: float
    smape: float
    coverage: float = float("nan")

    def as_dict(self) -> dict[str, float]:
        # Keep stable column names for CSV exports
        return {
            "RMSE": float(self.rmse),
            "MAE": float(self.mae),
            "SMAPE": float(self.smape),
            "Coverage": float(self.coverage),
        }


def compute_metrics(y_true: Iterable[float], y_pred: Iterable[float]) -> MetricPack:
    yt, yp = _to_valid_arrays(y_true, y_pred)
    return MetricPack(
        rmse=rmse(yt, yp),
        mae=mae(yt, yp),
        smape=smape(yt, yp),
    )


def backtest_lee_carter(
    series: MortalitySeries,
    *,
    holdout: int,
    adjust: str = "dt",
    jump_off: str = "fit",
    level: float = 0.95,
) -> dict[str, Any]:
    """
    Fit on all but the last `holdout` years, forecast h = holdout and score
    the held-out rates on the log scale (RMSE/MAE/SMAPE) plus interval coverage.
    """
    from mortcast.forecasting.lee_carter_forecast import forecast_lee_carter
    from mortcast.modeling.lee_carter import fit_lee_carter

    if isinstance(holdout, bool) or not isinstance(holdout, (int, np.integer)) or holdout <= 0:
        raise InvalidArgument(f"holdout must be a positive integer; got {holdout!r}")
    if series.n_years - int(holdout) < 2:
        raise InvalidArgument(
            f"{series.label}: holdout={holdout} leaves fewer than 2 training years out of {series.n_years}",
            context={"holdout": int(holdout), "n_years": series.n_years},
        )

    cut = int(series.years[-1]) - int(holdout)
    train = series.slice_years(end=cut)
    test = series.slice_years(start=cut + 1)

    fit = fit_lee_carter(train, adjust=adjust)
    fc = forecast_lee_carter(fit, int(holdout), jump_off=jump_off, level=level)

    observed = test.log_rates()
    pack = compute_metrics(observed.ravel(), fc.log_rates.ravel())
    cov = coverage(observed.ravel(), fc.lower_log.ravel(), fc.upper_log.ravel())

    return {
        **dict(series.key),
        "Train_Year_Min": int(train.years.min()),
        "Train_Year_Max": int(train.years.max()),
        "Test_Year_Min": int(test.years.min()),
        "Test_Year_Max": int(test.years.max()),
        "Adjust": adjust,
        "Jump_Off": jump_off,
        **MetricPack(rmse=pack.rmse, mae=pack.mae, smape=pack.smape, coverage=cov).as_dict(),
    }
