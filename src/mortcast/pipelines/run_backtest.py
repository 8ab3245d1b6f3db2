"""src/mortcast/pipelines/run_backtest.py"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from mortcast.common.config import AppConfig
from mortcast.common.utils import get_option, resolve_path, safe_float, safe_int
from mortcast.io.writers import write_csv
from mortcast.modeling.evaluation import backtest_lee_carter
from mortcast.pipelines.run_fit import load_vital_table

logger = logging.getLogger(__name__)


def run_backtest(cfg: AppConfig) -> None:
    """
    Holdout backtest per group: fit on all but the last `backtest.holdout_years`
    years, forecast them, and save accuracy + interval coverage.
    """
    holdout = safe_int(get_option(cfg.backtest, "holdout_years", 10), 10)
    adjust = str(get_option(cfg.model, "adjust", "dt"))
    jump_off = str(get_option(cfg.forecast, "jump_off", "fit"))
    level = safe_float(get_option(cfg.forecast, "interval_level", 0.95), 0.95)

    metrics_dir = resolve_path(cfg.project_root, get_option(cfg.paths, "metrics_dir", "artifacts/metrics"))
    metrics_dir.mkdir(parents=True, exist_ok=True)

    table = load_vital_table(cfg)

    rows: list[dict[str, Any]] = []
    for key, series in table.mortality_series().items():
        row = backtest_lee_carter(series, holdout=holdout, adjust=adjust, jump_off=jump_off, level=level)
        rows.append(row)
        logger.info(
            "Backtest %s: RMSE=%.4f MAE=%.4f coverage=%.2f",
            series.label, row["RMSE"], row["MAE"], row["Coverage"],
        )

    metrics_df = pd.DataFrame(rows).sort_values(["Region_Code", "Sex"]).reset_index(drop=True)
    metrics_path = write_csv(metrics_df, metrics_dir / "backtest_metrics.csv")

    logger.info("Backtest complete (holdout=%d years).", holdout)
    logger.info("Saved backtest metrics: %s", metrics_path)
