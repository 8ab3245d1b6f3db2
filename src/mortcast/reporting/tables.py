"""src/mortcast/reporting/tables.py"""

from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from mortcast.forecasting.lee_carter_forecast import Forecast
from mortcast.modeling.lee_carter import LeeCarterFit
from mortcast.modeling.lifetable import life_expectancy

KEY_COLS = ["Region_Code", "Sex"]


def _concat(frames: list[pd.DataFrame], columns: list[str], sort_cols: list[str]) -> pd.DataFrame:
    if not frames:
        return pd.DataFrame(columns=columns)
    out = pd.concat(frames, ignore_index=True)
    sort_cols = [c for c in sort_cols if c in out.columns]
    return out.sort_values(sort_cols).reset_index(drop=True)


def age_components(fits: Mapping[Any, LeeCarterFit]) -> pd.DataFrame:
    """
    Output:
        Region_Code, Sex, Age, ax, bx
    """
    return _concat(
        [f.age_components() for f in fits.values()],
        columns=[*KEY_COLS, "Age", "ax", "bx"],
        sort_cols=[*KEY_COLS, "Age"],
    )


def time_components(fits: Mapping[Any, LeeCarterFit]) -> pd.DataFrame:
    """
    Output:
        Region_Code, Sex, Year, kt
    """
    return _concat(
        [f.time_components() for f in fits.values()],
        columns=[*KEY_COLS, "Year", "kt"],
        sort_cols=[*KEY_COLS, "Year"],
    )


def fit_summary_table(fits: Mapping[Any, LeeCarterFit]) -> pd.DataFrame:
    """One row per group: spans, adjust method, drift, innovation variance, variance explained."""
    rows = [f.report() for f in fits.values()]
    if not rows:
        return pd.DataFrame(columns=[*KEY_COLS, "Adjust", "Drift", "Innovation_Variance", "Variance_Explained"])
    out = pd.DataFrame(rows)
    sort_cols = [c for c in KEY_COLS if c in out.columns]
    return out.sort_values(sort_cols).reset_index(drop=True) if sort_cols else out


def forecast_table(forecasts: Mapping[Any, Forecast]) -> pd.DataFrame:
    """
    Output:
        Region_Code, Sex, Age, Year, Mortality, Mortality_Lower_XX, Mortality_Upper_XX
    """
    return _concat(
        [fc.to_frame() for fc in forecasts.values()],
        columns=[*KEY_COLS, "Age", "Year", "Mortality"],
        sort_cols=[*KEY_COLS, "Year", "Age"],
    )


def kt_forecast_table(forecasts: Mapping[Any, Forecast]) -> pd.DataFrame:
    """
    Output:
        Region_Code, Sex, Year, kt, kt_Lower_XX, kt_Upper_XX, Interval_Kind, Interval_Level
    """
    return _concat(
        [fc.kt_frame() for fc in forecasts.values()],
        columns=[*KEY_COLS, "Year", "kt"],
        sort_cols=[*KEY_COLS, "Year"],
    )


def life_expectancy_table(mortality: pd.DataFrame, *, age: int = 0) -> pd.DataFrame:
    """
    Life expectancy at `age` per Region_Code, Sex, Year from a tidy
    rate table (observed canonical table or forecast_table output).
    """
    out = life_expectancy(mortality, age=age, keys=KEY_COLS)
    return out.rename(columns={"ex": f"e{int(age)}"})
