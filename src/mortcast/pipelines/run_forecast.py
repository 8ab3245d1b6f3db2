"""src/mortcast/pipelines/run_forecast.py"""

from __future__ import annotations

import logging
from typing import Any

from mortcast.common.config import AppConfig
from mortcast.common.utils import get_option, resolve_path, safe_float, safe_int
from mortcast.errors import MortcastError
from mortcast.forecasting.lee_carter_forecast import Forecast, forecast_lee_carter
from mortcast.io.readers import read_fit_registry, read_model_artifact
from mortcast.modeling.lee_carter import LeeCarterFit
from mortcast.pipelines.run_fit import REGISTRY_FILE
from mortcast.reporting.export import export_report_pack

logger = logging.getLogger(__name__)


def run_forecast(cfg: AppConfig) -> None:
    """
    Forecast every fitted group:
      1) load the fit registry written by `mortcast fit`
      2) project kt with the random walk, rebuild mortality surfaces + intervals
      3) export tidy tables (forecasts, kt, components, life expectancy)
    """
    horizon = safe_int(get_option(cfg.forecast, "horizon", 20), 20)
    jump_off = str(get_option(cfg.forecast, "jump_off", "fit"))
    level = safe_float(get_option(cfg.forecast, "interval_level", 0.95), 0.95)

    metrics_dir = resolve_path(cfg.project_root, get_option(cfg.paths, "metrics_dir", "artifacts/metrics"))
    forecasts_dir = resolve_path(cfg.project_root, get_option(cfg.paths, "forecasts_dir", "artifacts/forecasts"))
    forecasts_dir.mkdir(parents=True, exist_ok=True)

    registry_path = metrics_dir / REGISTRY_FILE
    if not registry_path.exists():
        raise FileNotFoundError(f"Missing {registry_path}. Run `mortcast fit` first.")
    registry = read_fit_registry(registry_path)

    fits: dict[tuple[Any, ...], LeeCarterFit] = {}
    forecasts: dict[tuple[Any, ...], Forecast] = {}

    for r in registry.itertuples(index=False):
        key = (str(r.Region_Code), str(r.Sex))
        payload = read_model_artifact(resolve_path(cfg.project_root, str(r.Model_Path)))
        fit: LeeCarterFit = payload["model"]
        try:
            fc = forecast_lee_carter(fit, horizon, jump_off=jump_off, level=level)
        except MortcastError:
            logger.error("Forecast failed for %s/%s (h=%s, jump_off=%s)", key[0], key[1], horizon, jump_off)
            raise
        fits[key] = fit
        forecasts[key] = fc

    pack = export_report_pack(fits=fits, forecasts=forecasts, out_dir=forecasts_dir)

    logger.info("Forecasting complete: %d group(s), h=%d, jump_off=%s.", len(forecasts), horizon, jump_off)
    logger.info("Saved forecasts: %s", pack.forecast_csv)
    logger.info("Saved kt forecasts: %s", pack.kt_forecast_csv)
    logger.info("Saved life expectancy: %s", pack.life_expectancy_csv)
