"""src/mortcast/modeling/lifetable.py"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from mortcast.errors import DataError, InvalidArgument

LIFE_TABLE_COLUMNS = ["Age", "mx", "qx", "ax", "lx", "dx", "Lx", "Tx", "ex"]


def _infant_ax(m0: float) -> float:
    """Separation factor for age 0 (Coale-Demeny style, both sexes)."""
    if m0 < 0.01724:
        return 0.14903 - 2.05527 * m0
    if m0 < 0.06891:
        return 0.04667 + 3.88089 * m0
    return 0.31411


def life_table(ages: Sequence[int], mx: Sequence[float], *, radix: int = 100_000) -> pd.DataFrame:
    """
    Single-year period life table from central death rates.

    The last age is treated as open: qx = 1 and Lx = lx / mx.
    Returns columns: [Age, mx, qx, ax, lx, dx, Lx, Tx, ex].
    """
    ages = np.asarray(ages, dtype=int)
    m = np.asarray(mx, dtype=float)
    if ages.size == 0 or ages.size != m.size:
        raise InvalidArgument(f"ages and mx must be non-empty and the same length; got {ages.size} and {m.size}")
    if radix <= 0:
        raise InvalidArgument(f"radix must be positive; got {radix}")
    if not np.isfinite(m).all() or (m < 0).any():
        raise DataError("mx must be finite and non-negative")
    if ages.size > 1 and not np.all(np.diff(ages) == 1):
        raise DataError("life_table expects contiguous single-year ages")

    n = np.ones_like(m)
    ax = 0.5 * n
    if ages[0] == 0:
        ax[0] = _infant_ax(float(m[0]))

    qx = (n * m) / (1.0 + (n - ax) * m)
    qx = np.clip(qx, 0.0, 1.0)
    qx[-1] = 1.0
    px = 1.0 - qx

    lx = np.empty_like(m)
    lx[0] = float(radix)
    if m.size > 1:
        lx[1:] = float(radix) * np.cumprod(px[:-1])
    dx = lx * qx

    Lx = n * lx - (n - ax) * dx
    m_last = float(m[-1])
    # open interval: L = l / m; with no recorded deaths fall back to a half-year
    Lx[-1] = lx[-1] / m_last if m_last > 0 else 0.5 * lx[-1]
    if m_last > 0:
        ax[-1] = 1.0 / m_last

    Tx = np.cumsum(Lx[::-1])[::-1]
    ex = np.divide(Tx, lx, out=np.zeros_like(Tx), where=lx > 0)

    return pd.DataFrame(
        {"Age": ages, "mx": m, "qx": qx, "ax": ax, "lx": lx, "dx": dx, "Lx": Lx, "Tx": Tx, "ex": ex}
    )[LIFE_TABLE_COLUMNS]


def life_expectancy(
    df: pd.DataFrame,
    *,
    age: int = 0,
    keys: Iterable[str] = ("Region_Code", "Sex"),
    year_col: str = "Year",
    age_col: str = "Age",
    value_col: str = "Mortality",
) -> pd.DataFrame:
    """
    Life expectancy at `age` for every (keys..., Year) group of a tidy
    rate table (observed or forecast).

    Returns columns: [keys..., Year, ex].
    """
    keys = [k for k in keys if k in df.columns]
    group_cols = [*keys, year_col]
    missing = [c for c in (*group_cols, age_col, value_col) if c not in df.columns]
    if missing:
        raise DataError(f"life_expectancy missing columns {missing}. Found: {list(df.columns)}")

    rows: list[dict] = []
    for gkey, g in df.groupby(group_cols, sort=True):
        gkey = gkey if isinstance(gkey, tuple) else (gkey,)
        g = g.sort_values(age_col)
        lt = life_table(g[age_col].to_numpy(int), g[value_col].to_numpy(float))
        at = lt.loc[lt["Age"] == int(age), "ex"]
        if at.empty:
            raise InvalidArgument(f"age {age} not present in group {gkey}")
        rows.append({**dict(zip(group_cols, gkey)), "ex": float(at.iloc[0])})

    if not rows:
        return pd.DataFrame(columns=[*group_cols, "ex"])
    return pd.DataFrame(rows)
