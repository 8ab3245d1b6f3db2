"""src/mortcast/tables/series.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np
import pandas as pd

from mortcast.errors import DataError


def _is_contiguous(values: np.ndarray) -> bool:
    return values.size <= 1 or bool(np.all(np.diff(values) == 1))


@dataclass(frozen=True, eq=False)
class MortalitySeries:
    """
    Dense age x year matrix of mortality rates for one population group.

    rates[i, j] is the rate at ages[i] in years[j]. Ages and years are
    contiguous integer ranges and every cell is present exactly once.
    exposures, when given, has the same shape and holds the population at risk.
    """
    key: Mapping[str, Any]
    ages: np.ndarray
    years: np.ndarray
    rates: np.ndarray
    exposures: np.ndarray | None = None

    def __post_init__(self) -> None:
        ages = np.array(self.ages, dtype=int)
        years = np.array(self.years, dtype=int)
        rates = np.asarray(self.rates, dtype=float)

        if rates.ndim != 2 or rates.shape != (ages.size, years.size):
            raise DataError(
                f"rates must have shape (n_ages, n_years)=({ages.size}, {years.size}); got {rates.shape}",
                context={"key": dict(self.key)},
            )
        if not _is_contiguous(ages):
            raise DataError("ages must be a contiguous increasing integer range", context={"key": dict(self.key)})
        if not _is_contiguous(years):
            raise DataError("years must be a contiguous increasing integer range", context={"key": dict(self.key)})

        exposures = None
        if self.exposures is not None:
            exposures = np.asarray(self.exposures, dtype=float)
            if exposures.shape != rates.shape:
                raise DataError(
                    f"exposures shape {exposures.shape} does not match rates shape {rates.shape}",
                    context={"key": dict(self.key)},
                )
            exposures = exposures.copy()
            exposures.setflags(write=False)

        rates = rates.copy()
        for arr in (ages, years, rates):
            arr.setflags(write=False)

        object.__setattr__(self, "key", dict(self.key))
        object.__setattr__(self, "ages", ages)
        object.__setattr__(self, "years", years)
        object.__setattr__(self, "rates", rates)
        object.__setattr__(self, "exposures", exposures)

    @property
    def n_ages(self) -> int:
        return int(self.ages.size)

    @property
    def n_years(self) -> int:
        return int(self.years.size)

    @property
    def label(self) -> str:
        return "/".join(str(v) for v in self.key.values()) or "series"

    def log_rates(self) -> np.ndarray:
        """
        Log of the rate matrix.

        Raises DataError if any cell is missing, non-finite or <= 0.
        """
        r = self.rates
        bad = ~np.isfinite(r) | (r <= 0)
        if bad.any():
            idx = np.argwhere(bad)[:5]
            sample = [(int(self.ages[i]), int(self.years[j]), float(r[i, j])) for i, j in idx]
            raise DataError(
                f"{self.label}: {int(bad.sum())} missing or non-positive mortality rates; "
                f"sample (age, year, rate)={sample}",
                context={"key": dict(self.key), "bad_cells": int(bad.sum())},
            )
        return np.log(r)

    def to_frame(self, value_col: str = "Mortality") -> pd.DataFrame:
        """Tidy (key..., Age, Year, value) frame, one row per cell."""
        age_grid, year_grid = np.meshgrid(self.ages, self.years, indexing="ij")
        out = pd.DataFrame(
            {
                "Age": age_grid.ravel(),
                "Year": year_grid.ravel(),
                value_col: self.rates.ravel(),
            }
        )
        for i, (k, v) in enumerate(self.key.items()):
            out.insert(i, k, v)
        return out

    def slice_years(self, start: int | None = None, end: int | None = None) -> "MortalitySeries":
        """Sub-series restricted to years in [start, end]."""
        mask = np.ones(self.n_years, dtype=bool)
        if start is not None:
            mask &= self.years >= int(start)
        if end is not None:
            mask &= self.years <= int(end)
        return MortalitySeries(
            key=self.key,
            ages=self.ages,
            years=self.years[mask],
            rates=self.rates[:, mask],
            exposures=None if self.exposures is None else self.exposures[:, mask],
        )

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        *,
        key: Mapping[str, Any] | None = None,
        age_col: str = "Age",
        year_col: str = "Year",
        value_col: str = "Mortality",
        exposure_col: str | None = None,
    ) -> "MortalitySeries":
        """
        Pivot a tidy frame for one group into a dense matrix.

        Raises DataError on duplicated (age, year) cells, gaps in the age or
        year ranges, or cells missing from the grid.
        """
        missing = [c for c in (age_col, year_col, value_col) if c not in df.columns]
        if exposure_col is not None and exposure_col not in df.columns:
            missing.append(exposure_col)
        if missing:
            raise DataError(f"missing columns {missing}. Found: {list(df.columns)}")

        key = dict(key or {})
        d = df.copy()
        d[age_col] = pd.to_numeric(d[age_col], errors="coerce")
        d[year_col] = pd.to_numeric(d[year_col], errors="coerce")
        if d[[age_col, year_col]].isna().any().any():
            raise DataError("age/year columns contain missing or non-numeric values", context={"key": key})
        d[age_col] = d[age_col].astype(int)
        d[year_col] = d[year_col].astype(int)

        dup = d.duplicated(subset=[age_col, year_col], keep=False)
        if dup.any():
            sample = d.loc[dup, [age_col, year_col]].head(5).to_dict(orient="records")
            raise DataError(
                f"duplicated (age, year) cells: count={int(dup.sum())}; sample={sample}",
                context={"key": key},
            )

        ages = np.arange(d[age_col].min(), d[age_col].max() + 1, dtype=int)
        years = np.arange(d[year_col].min(), d[year_col].max() + 1, dtype=int)
        if len(d) != ages.size * years.size:
            raise DataError(
                f"incomplete age x year grid: {len(d)} cells for {ages.size} ages x {years.size} years",
                context={"key": key},
            )

        def _pivot(col: str) -> np.ndarray:
            wide = (
                d.pivot(index=age_col, columns=year_col, values=col)
                .reindex(index=ages, columns=years)
            )
            return pd.DataFrame(wide).apply(pd.to_numeric, errors="coerce").to_numpy(dtype=float)

        rates = _pivot(value_col)
        exposures = _pivot(exposure_col) if exposure_col is not None else None
        return cls(key=key, ages=ages, years=years, rates=rates, exposures=exposures)
