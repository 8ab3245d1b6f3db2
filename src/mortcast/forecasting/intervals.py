"""src/mortcast/forecasting/intervals.py"""

from __future__ import annotations

from dataclasses import dataclass
from statistics import NormalDist
from typing import Iterable

import numpy as np
import pandas as pd

from mortcast.errors import InvalidArgument


def level_suffix(level: float) -> str:
    """0.95 -> '95', 0.8 -> '80'."""
    return f"{round(float(level) * 100, 1):g}"


@dataclass(frozen=True)
class IntervalResult:
    """
    Standard output for forecasts with uncertainty.

    forecast: point forecast
    lower: lower prediction interval
    upper: upper prediction interval
    level: e.g. 0.8, 0.95
    kind: "pi" (prediction interval) or "ci" (confidence interval)
    """
    forecast: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    level: float
    kind: str = "pi"

    def to_frame(self, years: Iterable[int], value_col: str) -> pd.DataFrame:
        years = list(years)
        sfx = level_suffix(self.level)
        return pd.DataFrame(
            {
                "Year": years,
                value_col: self.forecast.astype(float),
                f"{value_col}_Lower_{sfx}": self.lower.astype(float),
                f"{value_col}_Upper_{sfx}": self.upper.astype(float),
                "Interval_Kind": self.kind,
                "Interval_Level": float(self.level),
            }
        )


def check_level(level: float) -> float:
    try:
        x = float(level)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"interval level must be a number in (0, 1); got {level!r}") from e
    if not (0.0 < x < 1.0):
        raise InvalidArgument(f"interval level must be in (0, 1); got {level!r}", context={"level": level})
    return x


def z_from_level(level: float) -> float:
    """
    Convert central interval level to a normal z value.
    0.80 -> ~1.2816
    0.90 -> ~1.6449
    0.95 -> ~1.9600

    P(|Z| <= z) = level  =>  z = Phi^-1((1 + level) / 2).
    """
    x = check_level(level)
    return float(NormalDist().inv_cdf((1.0 + x) / 2.0))


def normal_pi(yhat: np.ndarray, sigma: np.ndarray | float, level: float = 0.95, *, z: float | None = None) -> IntervalResult:
    """
    Prediction interval assuming Normal errors with std = sigma
    (scalar, or one value per forecast step).
    """
    yhat = np.asarray(yhat, dtype=float)
    sigma = np.asarray(sigma, dtype=float)
    mult = z_from_level(level) if z is None else float(z)
    lower = yhat - mult * sigma
    upper = yhat + mult * sigma
    return IntervalResult(forecast=yhat, lower=lower, upper=upper, level=check_level(level), kind="pi")
