"""tests/unit/test_intervals.py"""

from __future__ import annotations

import numpy as np
import pytest

from mortcast.errors import InvalidArgument
from mortcast.forecasting.intervals import level_suffix, normal_pi, z_from_level


@pytest.mark.parametrize(
    "level, z",
    [(0.80, 1.2815516), (0.90, 1.6448536), (0.95, 1.9599640), (0.99, 2.5758293), (0.999, 3.2905267)],
)
def test_z_from_level_matches_normal_quantiles(level: float, z: float) -> None:
    assert z_from_level(level) == pytest.approx(z, abs=1e-6)


@pytest.mark.parametrize("bad", [0.0, 1.0, -0.5, 95, "high"])
def test_z_from_level_rejects_out_of_range(bad) -> None:
    with pytest.raises(InvalidArgument):
        z_from_level(bad)


def test_level_suffix() -> None:
    assert level_suffix(0.95) == "95"
    assert level_suffix(0.8) == "80"
    assert level_suffix(0.975) == "97.5"


def test_normal_pi_is_symmetric() -> None:
    yhat = np.array([1.0, 2.0, 3.0])
    res = normal_pi(yhat, np.array([0.1, 0.2, 0.3]), level=0.9)

    np.testing.assert_allclose(res.forecast - res.lower, res.upper - res.forecast)
    assert res.kind == "pi"
    assert res.level == 0.9

    df = res.to_frame([2020, 2021, 2022], "kt")
    assert list(df.columns) == ["Year", "kt", "kt_Lower_90", "kt_Upper_90", "Interval_Kind", "Interval_Level"]
