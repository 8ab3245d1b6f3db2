"""tests/unit/test_validation.py"""

from __future__ import annotations

import pandas as pd
import pytest

from mortcast.errors import DataError
from mortcast.validation.checks import validate_df, validate_forecast_table, validate_mortality_canonical
from mortcast.validation.schemas import MORTALITY_CANONICAL


def test_validate_mortality_canonical_passes(canonical_frame: pd.DataFrame) -> None:
    res = validate_mortality_canonical(canonical_frame, start_year=1990)
    res.raise_if_failed()  # should not raise
    assert res.ok


def test_validate_df_fails_on_missing_columns() -> None:
    df = pd.DataFrame({"Year": [2023], "Age": [0]})
    res = validate_df(df, schema=MORTALITY_CANONICAL, year_col="Year")
    assert not res.ok
    with pytest.raises(DataError, match="missing columns"):
        res.raise_if_failed()


def test_validate_fails_on_duplicates(canonical_frame: pd.DataFrame) -> None:
    dup = pd.concat([canonical_frame, canonical_frame.iloc[[0]]], ignore_index=True)
    with pytest.raises(DataError, match="duplicate"):
        validate_mortality_canonical(dup).raise_if_failed()


def test_validate_fails_on_negative_and_sex_labels(canonical_frame: pd.DataFrame) -> None:
    bad = canonical_frame.copy()
    bad.loc[0, "Deaths"] = -1.0
    bad.loc[1, "Sex"] = "Total"

    res = validate_mortality_canonical(bad)
    assert not res.ok
    assert any("negative" in e for e in res.errors)
    assert any(e.startswith("Sex:") for e in res.errors)


def test_validate_fails_on_age_and_year_range(canonical_frame: pd.DataFrame) -> None:
    res = validate_mortality_canonical(canonical_frame, start_year=2000, max_age=5)
    assert any("below min_year" in e for e in res.errors)
    assert any(e.startswith("Age:") for e in res.errors)


def test_validate_forecast_table_requires_rates() -> None:
    df = pd.DataFrame(
        {"Region_Code": ["SWE"], "Sex": ["Male"], "Age": [0], "Year": [2030], "Mortality": [float("nan")]}
    )
    with pytest.raises(DataError, match="missing values"):
        validate_forecast_table(df).raise_if_failed()
