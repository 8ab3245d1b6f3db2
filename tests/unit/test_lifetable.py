"""tests/unit/test_lifetable.py"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from mortcast.errors import DataError, InvalidArgument
from mortcast.modeling.lifetable import LIFE_TABLE_COLUMNS, life_expectancy, life_table


def test_life_table_radix_and_deaths_sum() -> None:
    ages = np.arange(0, 101)
    mx = 0.00005 * np.exp(0.09 * ages)
    lt = life_table(ages, mx, radix=100_000)

    assert list(lt.columns) == LIFE_TABLE_COLUMNS
    assert lt["lx"].iloc[0] == 100_000
    assert lt["dx"].sum() == pytest.approx(100_000)
    assert lt["qx"].iloc[-1] == 1.0
    assert (np.diff(lt["lx"].to_numpy()) <= 0).all()
    assert 60.0 < lt["ex"].iloc[0] < 90.0


def test_single_open_age_gives_inverse_rate() -> None:
    lt = life_table([0], [0.5])
    assert lt["ex"].iloc[0] == pytest.approx(2.0)


def test_infant_separation_factor() -> None:
    lt = life_table([0, 1, 2], [0.005, 0.001, 0.001])
    assert lt["ax"].iloc[0] == pytest.approx(0.14903 - 2.05527 * 0.005)
    assert lt["ax"].iloc[1] == 0.5


def test_life_table_input_errors() -> None:
    with pytest.raises(InvalidArgument):
        life_table([], [])
    with pytest.raises(InvalidArgument):
        life_table([0, 1], [0.01, 0.02], radix=0)
    with pytest.raises(DataError):
        life_table([0, 1], [0.01, -0.02])
    with pytest.raises(DataError):
        life_table([0, 2], [0.01, 0.02])


def test_life_expectancy_per_group_and_year(canonical_frame: pd.DataFrame) -> None:
    out = life_expectancy(canonical_frame, age=0)

    assert list(out.columns) == ["Region_Code", "Sex", "Year", "ex"]
    assert len(out) == 2 * 30
    assert (out["ex"] > 0).all()


def test_life_expectancy_missing_age(canonical_frame: pd.DataFrame) -> None:
    with pytest.raises(InvalidArgument):
        life_expectancy(canonical_frame, age=50)
