"""src/mortcast/forecasting/lee_carter_forecast.py"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np
import pandas as pd

from mortcast.errors import InvalidArgument
from mortcast.forecasting.intervals import IntervalResult, check_level, level_suffix, normal_pi, z_from_level
from mortcast.modeling.lee_carter import LeeCarterFit
from mortcast.modeling.random_walk import check_horizon

logger = logging.getLogger(__name__)

JUMP_OFF_CHOICES = ("fit", "actual")


@dataclass(frozen=True, eq=False)
class Forecast:
    """
    Lee-Carter forecast for one population group.

    log_rates, lower_log, upper_log : (n_ages, h) arrays on the log scale
    kt : projected index, Series indexed by future Year
    """
    key: Mapping[str, Any]
    ages: np.ndarray
    years: np.ndarray
    kt: pd.Series
    kt_origin: float
    drift: float
    innovation_variance: float
    log_rates: np.ndarray
    lower_log: np.ndarray
    upper_log: np.ndarray
    level: float
    z: float
    jump_off: str

    @property
    def horizon(self) -> int:
        return int(self.years.size)

    @property
    def rates(self) -> np.ndarray:
        return np.exp(self.log_rates)

    @property
    def lower(self) -> np.ndarray:
        return np.exp(self.lower_log)

    @property
    def upper(self) -> np.ndarray:
        return np.exp(self.upper_log)

    def kt_intervals(self) -> IntervalResult:
        steps = np.arange(1, self.horizon + 1, dtype=float)
        sigma = np.sqrt(steps * self.innovation_variance)
        return normal_pi(self.kt.to_numpy(), sigma, level=self.level, z=self.z)

    def kt_frame(self) -> pd.DataFrame:
        out = self.kt_intervals().to_frame(self.years, "kt")
        for i, (k, v) in enumerate(self.key.items()):
            out.insert(i, k, v)
        return out

    def to_frame(self) -> pd.DataFrame:
        """Tidy (key..., Age, Year, Mortality, Mortality_Lower_XX, Mortality_Upper_XX) frame."""
        sfx = level_suffix(self.level)
        age_grid, year_grid = np.meshgrid(self.ages, self.years, indexing="ij")
        out = pd.DataFrame(
            {
                "Age": age_grid.ravel().astype(int),
                "Year": year_grid.ravel().astype(int),
                "Mortality": self.rates.ravel(),
                f"Mortality_Lower_{sfx}": self.lower.ravel(),
                f"Mortality_Upper_{sfx}": self.upper.ravel(),
            }
        )
        for i, (k, v) in enumerate(self.key.items()):
            out.insert(i, k, v)
        return out.sort_values(["Year", "Age"]).reset_index(drop=True)


def jump_off_origin(fit: LeeCarterFit, jump_off: str = "fit") -> float:
    """
    Origin of the kt random walk.

    "fit"    : last fitted kt
    "actual" : kt backed out from the last observed log rates by least squares,
               sum_x bx * (log m[x, T] - ax) / sum_x bx^2
    """
    if jump_off == "fit":
        return float(fit.kt.iloc[-1])
    if jump_off == "actual":
        bx = fit.bx.to_numpy()
        last = fit.log_rates[:, -1] - fit.ax.to_numpy()
        return float(bx @ last / float(bx @ bx))
    raise InvalidArgument(
        f"unknown jump_off {jump_off!r}; expected one of {list(JUMP_OFF_CHOICES)}",
        context={"jump_off": jump_off},
    )


def forecast_lee_carter(
    fit: LeeCarterFit,
    h: int,
    *,
    jump_off: str = "fit",
    level: float = 0.95,
    z: float | None = None,
) -> Forecast:
    """
    Project kt with the fitted random walk and rebuild log mortality:

        kt[T+j]       = origin + drift * j
        log m[x, T+j] = ax[x] + bx[x] * kt[T+j]
        half-width    = z * sqrt(j * innovation_variance) * |bx[x]|

    z defaults to the normal multiplier for `level`.
    """
    h = check_horizon(h)
    level = check_level(level)
    if jump_off not in JUMP_OFF_CHOICES:
        raise InvalidArgument(
            f"unknown jump_off {jump_off!r}; expected one of {list(JUMP_OFF_CHOICES)}",
            context={"jump_off": jump_off},
        )
    mult = z_from_level(level) if z is None else float(z)
    if not np.isfinite(mult) or mult < 0:
        raise InvalidArgument(f"interval multiplier must be finite and >= 0; got {z!r}", context={"z": z})

    origin = jump_off_origin(fit, jump_off)
    rw = fit.random_walk
    kt_future = rw.predict(h, origin=origin)
    kt_sd = rw.std(h)

    last_year = int(fit.years[-1])
    years = np.arange(last_year + 1, last_year + h + 1, dtype=int)

    ax = fit.ax.to_numpy()
    bx = fit.bx.to_numpy()
    log_point = ax[:, None] + np.outer(bx, kt_future)
    half = mult * np.outer(np.abs(bx), kt_sd)

    logger.debug(
        "Forecast %s: h=%d from %d, jump_off=%s, origin=%.4f, drift=%.4f",
        fit.label, h, last_year, jump_off, origin, rw.drift,
    )

    return Forecast(
        key=dict(fit.key),
        ages=fit.ages,
        years=years,
        kt=pd.Series(kt_future, index=pd.Index(years, name="Year"), name="kt"),
        kt_origin=origin,
        drift=rw.drift,
        innovation_variance=rw.innovation_variance,
        log_rates=log_point,
        lower_log=log_point - half,
        upper_log=log_point + half,
        level=level,
        z=mult,
        jump_off=jump_off,
    )
