"""src/mortcast/reporting/export.py"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from mortcast.forecasting.lee_carter_forecast import Forecast
from mortcast.io.writers import write_csv
from mortcast.reporting.tables import (
    age_components,
    fit_summary_table,
    forecast_table,
    kt_forecast_table,
    life_expectancy_table,
    time_components,
)
from mortcast.modeling.lee_carter import LeeCarterFit
from mortcast.validation.checks import validate_df, validate_forecast_table
from mortcast.validation.schemas import AGE_COMPONENTS, TIME_COMPONENTS


@dataclass(frozen=True)
class ReportPackPaths:
    out_dir: Path

    age_components_csv: Path
    time_components_csv: Path
    fit_summary_csv: Path
    forecast_csv: Path
    kt_forecast_csv: Path
    life_expectancy_csv: Path


def export_report_pack(
    *,
    fits: Mapping[Any, LeeCarterFit],
    forecasts: Mapping[Any, Forecast],
    out_dir: Path,
) -> ReportPackPaths:
    """
    Build a reporting "pack" of tidy CSV tables:
        - age and time components of every fit
        - fit summary
        - mortality and kt forecasts with intervals
        - forecast life expectancy at the youngest modelled age

    This module does NOT fit or forecast. It consumes finished results.
    """
    out_dir = Path(out_dir)

    ac = age_components(fits)
    tc = time_components(fits)
    fc = forecast_table(forecasts)

    # Validate outputs (fail early)
    validate_df(ac, schema=AGE_COMPONENTS, age_col="Age", unique_keys=("Region_Code", "Sex", "Age")).raise_if_failed()
    validate_df(tc, schema=TIME_COMPONENTS, year_col="Year", unique_keys=("Region_Code", "Sex", "Year")).raise_if_failed()
    validate_forecast_table(fc).raise_if_failed()

    paths = ReportPackPaths(
        out_dir=out_dir,
        age_components_csv=out_dir / "age_components.csv",
        time_components_csv=out_dir / "time_components.csv",
        fit_summary_csv=out_dir / "fit_summary.csv",
        forecast_csv=out_dir / "mortality_forecast.csv",
        kt_forecast_csv=out_dir / "kt_forecast.csv",
        life_expectancy_csv=out_dir / "life_expectancy_forecast.csv",
    )

    write_csv(ac, paths.age_components_csv)
    write_csv(tc, paths.time_components_csv)
    write_csv(fit_summary_table(fits), paths.fit_summary_csv)
    write_csv(fc, paths.forecast_csv)
    write_csv(kt_forecast_table(forecasts), paths.kt_forecast_csv)
    youngest = int(fc["Age"].min()) if not fc.empty else 0
    write_csv(life_expectancy_table(fc, age=youngest), paths.life_expectancy_csv)

    return paths
