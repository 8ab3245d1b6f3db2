"""tests/unit/test_random_walk.py"""

from __future__ import annotations

import numpy as np
import pytest

from mortcast.errors import ConvergenceError, InvalidArgument
from mortcast.modeling.random_walk import check_horizon, fit_random_walk


def test_drift_and_variance_from_differences() -> None:
    # diffs [2, 1, 4]: mean 7/3, sample variance 7/3
    rw = fit_random_walk(np.array([1.0, 3.0, 4.0, 8.0]))
    assert rw.drift == pytest.approx(7.0 / 3.0)
    assert rw.innovation_variance == pytest.approx(7.0 / 3.0)
    assert rw.last_value == 8.0
    assert rw.n_obs == 4


def test_predict_and_variance_grow_linearly() -> None:
    rw = fit_random_walk(np.array([1.0, 3.0, 4.0, 8.0]))
    np.testing.assert_allclose(rw.predict(2), [8.0 + 7.0 / 3.0, 8.0 + 14.0 / 3.0])
    np.testing.assert_allclose(rw.predict(2, origin=0.0), [7.0 / 3.0, 14.0 / 3.0])
    np.testing.assert_allclose(rw.variance(3), np.array([1.0, 2.0, 3.0]) * 7.0 / 3.0)
    np.testing.assert_allclose(rw.std(4), np.sqrt(np.arange(1, 5) * 7.0 / 3.0))


def test_two_points_give_zero_variance() -> None:
    rw = fit_random_walk(np.array([5.0, 2.0]))
    assert rw.drift == pytest.approx(-3.0)
    assert rw.innovation_variance == 0.0


def test_too_short_raises() -> None:
    with pytest.raises(ConvergenceError):
        fit_random_walk(np.array([1.0]))


@pytest.mark.parametrize("bad", [0, -3, 1.5, True, "2"])
def test_check_horizon_rejects(bad) -> None:
    with pytest.raises(InvalidArgument):
        check_horizon(bad)


def test_check_horizon_accepts_numpy_int() -> None:
    assert check_horizon(np.int64(4)) == 4
