"""src/mortcast/preprocessing/clean_mortality.py"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

CANONICAL_COLUMNS = ["Region_Code", "Sex", "Age", "Year", "Deaths", "Population", "Mortality"]

SEX_LABELS: dict[str, str] = {
    "f": "Female",
    "female": "Female",
    "females": "Female",
    "m": "Male",
    "male": "Male",
    "males": "Male",
    "t": "Total",
    "total": "Total",
}


def parse_age_labels(ages: pd.Series) -> pd.Series:
    """
    Lower bound of age labels such as '0', '85', '110+'.
    Returns a nullable integer Series.
    """
    s = ages.astype("string").str.strip()
    return pd.to_numeric(s.str.extract(r"(\d+)")[0], errors="coerce").astype("Int64")


def clean_mortality(
    df: pd.DataFrame,
    *,
    drop_sexes: Iterable[str] = ("Total",),
    region_code: str | None = None,
) -> pd.DataFrame:
    """
    Standardize a tidy mortality export to canonical schema:

        Region_Code, Sex, Age, Year, Deaths, Population, Mortality

    Accepts common raw variants like:
        Region / Country / Code
        Exposure / Pop / Population
        Mx / Rate / Mortality

    Mortality is derived as Deaths / Population where it is not given.
    Cells with zero population and no recorded rate get Mortality = 0.
    """
    d = df.copy()
    d.columns = [str(c).strip() for c in d.columns]

    rename_map = {
        "Region": "Region_Code",
        "region": "Region_Code",
        "Country": "Region_Code",
        "country": "Region_Code",
        "Code": "Region_Code",
        "PopName": "Region_Code",
        "sex": "Sex",
        "age": "Age",
        "year": "Year",
        "deaths": "Deaths",
        "Dx": "Deaths",
        "Exposure": "Population",
        "exposure": "Population",
        "Pop": "Population",
        "population": "Population",
        "Mx": "Mortality",
        "mx": "Mortality",
        "Rate": "Mortality",
        "mortality": "Mortality",
    }
    d = d.rename(columns={c: rename_map[c] for c in d.columns if c in rename_map})

    if "Region_Code" not in d.columns:
        d["Region_Code"] = region_code or "ALL"

    required = {"Sex", "Age", "Year", "Population"}
    missing = required - set(d.columns)
    if missing:
        raise KeyError(f"Mortality missing columns {sorted(missing)}. Found: {list(d.columns)}")
    if "Deaths" not in d.columns and "Mortality" not in d.columns:
        raise KeyError(f"Mortality needs 'Deaths' or 'Mortality'. Found: {list(d.columns)}")

    d["Region_Code"] = d["Region_Code"].astype("string").str.strip()
    sex = d["Sex"].astype("string").str.strip()
    d["Sex"] = sex.str.lower().map(SEX_LABELS).fillna(sex)

    d["Age"] = parse_age_labels(d["Age"])
    d["Year"] = pd.to_numeric(d["Year"], errors="coerce").astype("Int64")
    d["Population"] = pd.to_numeric(d["Population"], errors="coerce").astype(float)

    if "Deaths" in d.columns:
        d["Deaths"] = pd.to_numeric(d["Deaths"], errors="coerce").astype(float)
    if "Mortality" in d.columns:
        d["Mortality"] = pd.to_numeric(d["Mortality"], errors="coerce").astype(float)
    else:
        d["Mortality"] = np.divide(
            d["Deaths"].to_numpy(float),
            d["Population"].to_numpy(float),
            out=np.full(len(d), np.nan),
            where=d["Population"].to_numpy(float) > 0,
        )
    if "Deaths" not in d.columns:
        d["Deaths"] = d["Mortality"] * d["Population"]

    # empty cells: nobody at risk and no rate recorded
    empty = d["Mortality"].isna() & (d["Population"] == 0)
    d.loc[empty, "Mortality"] = 0.0
    d.loc[empty & d["Deaths"].isna(), "Deaths"] = 0.0

    drop = {str(s) for s in drop_sexes}
    if drop:
        d = d[~d["Sex"].isin(drop)].copy()

    d = d.dropna(subset=["Region_Code", "Sex", "Age", "Year"]).copy()
    d["Age"] = d["Age"].astype(int)
    d["Year"] = d["Year"].astype(int)

    return (
        d[CANONICAL_COLUMNS]
        .sort_values(["Region_Code", "Sex", "Year", "Age"])
        .reset_index(drop=True)
    )


def collapse_ages(df: pd.DataFrame, *, max_age: int) -> pd.DataFrame:
    """
    Fold all ages >= max_age into an open age group labelled max_age.

    Deaths and Population are summed; Mortality is recomputed as
    Deaths / Population (0 where the group has no population).
    """
    max_age = int(max_age)
    d = df.copy()
    d["Age"] = np.minimum(d["Age"].to_numpy(int), max_age)

    out = (
        d.groupby(["Region_Code", "Sex", "Year", "Age"], as_index=False)
        .agg(Deaths=("Deaths", "sum"), Population=("Population", "sum"), Mortality=("Mortality", "first"))
    )

    top = out["Age"] == max_age
    pop = out.loc[top, "Population"].to_numpy(float)
    deaths = out.loc[top, "Deaths"].to_numpy(float)
    out.loc[top, "Mortality"] = np.divide(deaths, pop, out=np.zeros_like(deaths), where=pop > 0)

    return (
        out[CANONICAL_COLUMNS]
        .sort_values(["Region_Code", "Sex", "Year", "Age"])
        .reset_index(drop=True)
    )
