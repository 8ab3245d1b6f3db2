"""src/mortcast/tables/vital.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

import pandas as pd

from mortcast.errors import DataError, InvalidArgument
from mortcast.tables.series import MortalitySeries
from mortcast.validation.checks import check_unique_keys

GroupKey = tuple[Any, ...]


@dataclass(frozen=True)
class VitalRoles:
    """Semantic role bindings: which column holds what."""
    age: str = "Age"
    sex: str | None = "Sex"
    deaths: str | None = "Deaths"
    population: str | None = "Population"
    mortality: str | None = "Mortality"

    def bound_columns(self) -> list[str]:
        cols = [self.age, self.sex, self.deaths, self.population, self.mortality]
        return [c for c in cols if c]


class VitalTable:
    """
    Immutable tidy demographic table.

    index : time column (one row per index value within each key + age cell)
    keys  : columns identifying a population group, e.g. ("Region_Code", "Sex")
    roles : semantic bindings for age / sex / deaths / population / mortality

    Validated at construction: all bound columns exist and
    (index, keys, age) combinations are unique. The rows are held privately;
    `data` and `to_frame()` hand out copies.
    """

    __slots__ = ("_data", "_index", "_keys", "_roles")

    def __init__(
        self,
        data: pd.DataFrame,
        index: str = "Year",
        keys: tuple[str, ...] = ("Region_Code", "Sex"),
        roles: VitalRoles | None = None,
    ) -> None:
        keys = tuple(keys)
        roles = roles or VitalRoles()

        required = [index, *keys, *roles.bound_columns()]
        missing = [c for c in dict.fromkeys(required) if c not in data.columns]
        if missing:
            raise DataError(
                f"vital table missing columns {missing}. Found: {list(data.columns)}",
                context={"missing": missing},
            )

        unique_on = list(dict.fromkeys([index, *keys, roles.age]))
        errs = check_unique_keys(data, unique_on)
        if errs:
            raise DataError("; ".join(errs), context={"unique_on": unique_on})

        sort_cols = list(dict.fromkeys([*keys, index, roles.age]))
        frozen = data.sort_values(sort_cols).reset_index(drop=True).copy()

        object.__setattr__(self, "_data", frozen)
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "_keys", keys)
        object.__setattr__(self, "_roles", roles)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"VitalTable is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"VitalTable is immutable; cannot delete {name!r}")

    def __reduce__(self):
        return (VitalTable, (self._data, self._index, self._keys, self._roles))

    def __repr__(self) -> str:
        return f"VitalTable(rows={len(self._data)}, index={self._index!r}, keys={self._keys!r})"

    def __len__(self) -> int:
        return len(self._data)

    @property
    def data(self) -> pd.DataFrame:
        return self._data.copy()

    @property
    def index(self) -> str:
        return self._index

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    @property
    def roles(self) -> VitalRoles:
        return self._roles

    def to_frame(self) -> pd.DataFrame:
        """A copy of the underlying rows; the table itself is never mutated."""
        return self._data.copy()

    def with_data(self, data: pd.DataFrame) -> "VitalTable":
        """New table with the same index/keys/roles over different rows."""
        return VitalTable(data=data, index=self._index, keys=self._keys, roles=self._roles)

    def group_keys(self) -> list[GroupKey]:
        if not self._keys:
            return [()]
        uniq = self._data[list(self._keys)].drop_duplicates()
        return [tuple(r) for r in uniq.itertuples(index=False, name=None)]

    def groups(self) -> Iterator[tuple[GroupKey, pd.DataFrame]]:
        if not self._keys:
            yield (), self._data.copy()
            return
        for k, g in self._data.groupby(list(self._keys), sort=True, dropna=False):
            k = k if isinstance(k, tuple) else (k,)
            yield k, g.reset_index(drop=True)

    def filter_keys(self, **values: Any) -> "VitalTable":
        """Rows whose key columns equal the given values, e.g. filter_keys(Sex="Female")."""
        unknown = [k for k in values if k not in self._keys]
        if unknown:
            raise InvalidArgument(
                f"not key columns: {unknown}; keys={list(self._keys)}",
                context={"unknown": unknown, "keys": list(self._keys)},
            )
        mask = pd.Series(True, index=self._data.index)
        for k, v in values.items():
            mask &= self._data[k] == v
        return self.with_data(self._data[mask])

    def mortality_series(self, *, value: str | None = None) -> dict[GroupKey, MortalitySeries]:
        """One dense MortalitySeries per key group."""
        value_col = value or self.roles.mortality
        if not value_col:
            raise DataError("vital table has no mortality role bound and no value column was given")
        exposure_col = self.roles.population

        out: dict[GroupKey, MortalitySeries] = {}
        for k, g in self.groups():
            out[k] = MortalitySeries.from_frame(
                g,
                key=dict(zip(self.keys, k)),
                age_col=self.roles.age,
                year_col=self.index,
                value_col=value_col,
                exposure_col=exposure_col,
            )
        return out

    @classmethod
    def from_canonical(cls, df: pd.DataFrame) -> "VitalTable":
        """Wrap a canonical mortality table (Region_Code, Sex, Age, Year, Deaths, Population, Mortality)."""
        return cls(data=df, index="Year", keys=("Region_Code", "Sex"), roles=VitalRoles())
