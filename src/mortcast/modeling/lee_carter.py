"""src/mortcast/modeling/lee_carter.py"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

import numpy as np
import pandas as pd

from mortcast.errors import ConvergenceError, DataError, InvalidArgument
from mortcast.modeling.random_walk import RandomWalkDrift, fit_random_walk
from mortcast.tables.series import MortalitySeries

if TYPE_CHECKING:
    from mortcast.forecasting.lee_carter_forecast import Forecast

logger = logging.getLogger(__name__)

ADJUST_METHODS = ("dt", "deaths", "none")

# relative floor below which the leading singular value counts as zero
_SVD_RTOL = 1e-12


@dataclass(frozen=True, eq=False)
class LeeCarterFit:
    """
    Fitted Lee-Carter model for one population group:

        log m[x, t] = ax[x] + bx[x] * kt[t] + e[x, t]

    ax, bx : Series indexed by Age (bx sums to 1)
    kt     : Series indexed by Year
    drift, innovation_variance : random walk with drift fitted to kt
    variance_explained : s1^2 / sum(s_i^2) of the centered log-rate matrix
    log_rates : observed log rates (ages x years)
    """
    key: Mapping[str, Any]
    ax: pd.Series
    bx: pd.Series
    kt: pd.Series
    drift: float
    innovation_variance: float
    variance_explained: float
    adjust: str
    log_rates: np.ndarray
    singular_values: np.ndarray

    @property
    def ages(self) -> np.ndarray:
        return self.ax.index.to_numpy(dtype=int)

    @property
    def years(self) -> np.ndarray:
        return self.kt.index.to_numpy(dtype=int)

    @property
    def label(self) -> str:
        return "/".join(str(v) for v in self.key.values()) or "series"

    @property
    def random_walk(self) -> RandomWalkDrift:
        return RandomWalkDrift(
            last_value=float(self.kt.iloc[-1]),
            drift=float(self.drift),
            innovation_variance=float(self.innovation_variance),
            n_obs=int(self.kt.size),
        )

    def fitted_log_rates(self) -> np.ndarray:
        """ax + bx * kt over the observed ages x years."""
        return self.ax.to_numpy()[:, None] + np.outer(self.bx.to_numpy(), self.kt.to_numpy())

    def residuals(self) -> np.ndarray:
        """Observed minus fitted log rates."""
        return self.log_rates - self.fitted_log_rates()

    def age_components(self) -> pd.DataFrame:
        out = pd.DataFrame({"Age": self.ages, "ax": self.ax.to_numpy(), "bx": self.bx.to_numpy()})
        for i, (k, v) in enumerate(self.key.items()):
            out.insert(i, k, v)
        return out

    def time_components(self) -> pd.DataFrame:
        out = pd.DataFrame({"Year": self.years, "kt": self.kt.to_numpy()})
        for i, (k, v) in enumerate(self.key.items()):
            out.insert(i, k, v)
        return out

    def report(self) -> dict[str, Any]:
        resid = self.residuals()
        return {
            **dict(self.key),
            "Adjust": self.adjust,
            "Age_Min": int(self.ages.min()),
            "Age_Max": int(self.ages.max()),
            "Year_Min": int(self.years.min()),
            "Year_Max": int(self.years.max()),
            "Drift": float(self.drift),
            "Innovation_Variance": float(self.innovation_variance),
            "Variance_Explained": float(self.variance_explained),
            "Residual_RMSE": float(np.sqrt(np.mean(resid**2))),
        }

    def forecast(self, h: int, **kwargs: Any) -> "Forecast":
        from mortcast.forecasting.lee_carter_forecast import forecast_lee_carter

        return forecast_lee_carter(self, h, **kwargs)


def _match_yearly_totals(
    ax: np.ndarray,
    bx: np.ndarray,
    kt: np.ndarray,
    rates: np.ndarray,
    weights: np.ndarray,
    *,
    max_iter: int = 50,
    tol: float = 1e-10,
) -> np.ndarray:
    """
    Per year, Newton-solve for k so that
        sum_x w[x] * exp(ax[x] + k * bx[x]) == sum_x w[x] * m[x, t]
    starting from the SVD value of kt[t].
    """
    out = kt.astype(float).copy()
    for j in range(out.size):
        w = weights[:, j]
        target = float(np.sum(w * rates[:, j]))
        k = out[j]
        for _ in range(max_iter):
            fitted = w * np.exp(ax + k * bx)
            f = float(fitted.sum()) - target
            fp = float(np.sum(fitted * bx))
            if not np.isfinite(fp) or fp == 0.0:
                raise ConvergenceError(
                    f"total-deaths adjustment has a flat derivative at column {j}",
                    context={"column": j},
                )
            step = f / fp
            k -= step
            if abs(step) < tol * (1.0 + abs(k)):
                break
        else:
            raise ConvergenceError(
                f"total-deaths adjustment did not converge in {max_iter} iterations at column {j}",
                context={"column": j, "max_iter": max_iter},
            )
        out[j] = k
    return out


def fit_lee_carter(series: MortalitySeries, *, adjust: str = "dt") -> LeeCarterFit:
    """
    Fit the Lee-Carter model to a mortality surface.

    Steps:
      1) ax = mean over years of log m
      2) Z = log m - ax
      3) rank-1 SVD of Z: s1 * u1 * v1^T
      4) bx = u1 / sum(u1), kt = s1 * v1 * sum(u1)
      5) adjust kt:
           "dt"     least-squares refit  kt = (bx . Z) / (bx . bx)
           "deaths" per-year match of sum_x w * exp(ax + kt bx) to observed totals
                    (w = exposures when available, else 1)
           "none"   keep the SVD kt
      6) random walk with drift on kt
      7) variance explained = s1^2 / sum(s^2)
    """
    if adjust not in ADJUST_METHODS:
        raise InvalidArgument(
            f"unknown adjust method {adjust!r}; expected one of {list(ADJUST_METHODS)}",
            context={"adjust": adjust},
        )

    log_m = series.log_rates()

    if series.n_ages < 2 or series.n_years < 2:
        raise ConvergenceError(
            f"{series.label}: Lee-Carter needs at least 2 ages and 2 years; "
            f"got {series.n_ages} age(s) x {series.n_years} year(s)",
            context={"key": dict(series.key), "n_ages": series.n_ages, "n_years": series.n_years},
        )

    ax = log_m.mean(axis=1)
    Z = log_m - ax[:, None]
    U, s, Vt = np.linalg.svd(Z, full_matrices=False)

    scale = max(1.0, float(np.abs(log_m).max()))
    if s[0] <= _SVD_RTOL * scale:
        raise ConvergenceError(
            f"{series.label}: centered log rates have no variation over time",
            context={"key": dict(series.key)},
        )

    u = U[:, 0]
    v = Vt[0, :]
    u_sum = float(u.sum())
    if abs(u_sum) <= _SVD_RTOL:
        raise ConvergenceError(
            f"{series.label}: leading age profile sums to zero; bx normalization is undefined",
            context={"key": dict(series.key)},
        )

    bx = u / u_sum
    kt = s[0] * v * u_sum

    if adjust == "dt":
        kt = (bx @ Z) / float(bx @ bx)
    elif adjust == "deaths":
        if series.exposures is None:
            weights = np.ones_like(series.rates)
        else:
            weights = series.exposures
            if not np.isfinite(weights).all() or (weights < 0).any():
                raise DataError(
                    f"{series.label}: exposures must be finite and non-negative for the deaths adjustment",
                    context={"key": dict(series.key)},
                )
        kt = _match_yearly_totals(ax, bx, kt, series.rates, weights)

    variance_explained = min(1.0, float(s[0] ** 2 / np.sum(s**2)))
    rw = fit_random_walk(kt)

    logger.debug(
        "Fitted Lee-Carter for %s: %d ages x %d years, adjust=%s, var_explained=%.4f, drift=%.4f",
        series.label, series.n_ages, series.n_years, adjust, variance_explained, rw.drift,
    )

    log_m.setflags(write=False)
    return LeeCarterFit(
        key=dict(series.key),
        ax=pd.Series(ax, index=pd.Index(series.ages, name="Age"), name="ax"),
        bx=pd.Series(bx, index=pd.Index(series.ages, name="Age"), name="bx"),
        kt=pd.Series(kt, index=pd.Index(series.years, name="Year"), name="kt"),
        drift=rw.drift,
        innovation_variance=rw.innovation_variance,
        variance_explained=variance_explained,
        adjust=adjust,
        log_rates=log_m,
        singular_values=s,
    )
