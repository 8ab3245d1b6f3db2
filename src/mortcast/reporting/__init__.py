"""src/mortcast/reporting/__init__.py"""

from __future__ import annotations

from .export import ReportPackPaths, export_report_pack
from .tables import (
    age_components,
    fit_summary_table,
    forecast_table,
    kt_forecast_table,
    life_expectancy_table,
    time_components,
)

__all__ = [
    "ReportPackPaths",
    "export_report_pack",
    "age_components",
    "time_components",
    "fit_summary_table",
    "forecast_table",
    "kt_forecast_table",
    "life_expectancy_table",
]
