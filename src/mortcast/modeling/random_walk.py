"""src/mortcast/modeling/random_walk.py"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mortcast.errors import ConvergenceError, InvalidArgument


def check_horizon(steps: int) -> int:
    """Validate a forecast horizon: a positive integer."""
    if isinstance(steps, bool) or not isinstance(steps, (int, np.integer)):
        raise InvalidArgument(f"horizon must be a positive integer; got {steps!r}", context={"h": steps})
    if int(steps) <= 0:
        raise InvalidArgument(f"horizon must be a positive integer; got {steps!r}", context={"h": int(steps)})
    return int(steps)


@dataclass(frozen=True)
class RandomWalkDrift:
    """
    Random walk with drift:
      k[t] = k[t-1] + drift + e[t],   Var(e) = innovation_variance

    Point forecast j steps ahead of origin: origin + drift * j.
    Forecast variance j steps ahead: j * innovation_variance.
    """
    last_value: float
    drift: float
    innovation_variance: float
    n_obs: int

    def predict(self, steps: int, *, origin: float | None = None) -> np.ndarray:
        steps = check_horizon(steps)
        start = self.last_value if origin is None else float(origin)
        horizon = np.arange(1, steps + 1, dtype=float)
        return (start + self.drift * horizon).astype(float)

    def variance(self, steps: int) -> np.ndarray:
        steps = check_horizon(steps)
        return np.arange(1, steps + 1, dtype=float) * self.innovation_variance

    def std(self, steps: int) -> np.ndarray:
        return np.sqrt(self.variance(steps))


def fit_random_walk(k: np.ndarray) -> RandomWalkDrift:
    """
    drift = mean of first differences
    innovation_variance = sample variance (ddof=1) of first differences,
    0.0 when only one difference is available.
    """
    y = np.asarray(k, dtype=float)
    if y.ndim != 1 or y.size < 2:
        raise ConvergenceError(
            f"random walk needs at least 2 points; got {y.size}",
            context={"n_obs": int(y.size)},
        )
    if not np.isfinite(y).all():
        raise ConvergenceError("random walk input contains non-finite values")

    dk = np.diff(y)
    drift = float(dk.mean())
    variance = float(dk.var(ddof=1)) if dk.size >= 2 else 0.0
    return RandomWalkDrift(
        last_value=float(y[-1]),
        drift=drift,
        innovation_variance=variance,
        n_obs=int(y.size),
    )
