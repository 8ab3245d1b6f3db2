"""src/mortcast/validation/checks.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import pandas as pd

from mortcast.errors import DataError
from mortcast.validation.schemas import SchemaSpec, assert_schema


@dataclass(frozen=True)
class CheckResult:
    ok: bool
    errors: tuple[str, ...]

    def raise_if_failed(self) -> None:
        if not self.ok:
            msg = "\n".join(self.errors) if self.errors else "Validation failed."
            raise DataError(msg, context={"errors": list(self.errors)})


def _as_int_series(s: pd.Series) -> pd.Series:
    return pd.to_numeric(s, errors="coerce").astype("Int64")


def _as_float_series(s: pd.Series) -> pd.Series:
    return pd.to_numeric(s, errors="coerce")


def check_allowed_values(df: pd.DataFrame, *, col: str, allowed: Iterable[str]) -> list[str]:
    errs: list[str] = []
    if col not in df.columns:
        return errs
    allowed_set = {str(a) for a in allowed}
    vals = df[col].astype("string").str.strip()
    bad = ~vals.isin(allowed_set)
    n_bad = int(bad.sum())
    if n_bad:
        sample = vals[bad].dropna().unique()[:10].tolist()
        errs.append(f"{col}: expected one of {sorted(allowed_set)}; bad_count={n_bad}; sample={sample}")
    return errs


def check_year_range(df: pd.DataFrame, *, col: str = "Year", min_year: int | None = None, max_year: int | None = None) -> list[str]:
    errs: list[str] = []
    if col not in df.columns:
        return errs
    y = _as_int_series(df[col])
    if min_year is not None:
        bad = y < int(min_year)
        if int(bad.sum()):
            errs.append(f"{col}: {int(bad.sum())} rows below min_year={min_year}")
    if max_year is not None:
        bad = y > int(max_year)
        if int(bad.sum()):
            errs.append(f"{col}: {int(bad.sum())} rows above max_year={max_year}")
    return errs


def check_age_range(df: pd.DataFrame, *, col: str = "Age", min_age: int = 0, max_age: int = 120) -> list[str]:
    errs: list[str] = []
    if col not in df.columns:
        return errs
    a = _as_int_series(df[col])
    bad = (a < int(min_age)) | (a > int(max_age))
    n_bad = int(bad.sum())
    if n_bad:
        sample = a[bad].dropna().unique()[:10].tolist()
        errs.append(f"{col}: expected [{min_age}..{max_age}]; bad_count={n_bad}; sample={sample}")
    return errs


def check_nonnegative(df: pd.DataFrame, cols: Sequence[str]) -> list[str]:
    errs: list[str] = []
    for c in cols:
        if c not in df.columns:
            continue
        x = _as_float_series(df[c])
        bad = x < 0
        n_bad = int(bad.sum())
        if n_bad:
            errs.append(f"{c}: {n_bad} negative values found")
    return errs


def check_not_missing(df: pd.DataFrame, cols: Sequence[str]) -> list[str]:
    errs: list[str] = []
    for c in cols:
        if c not in df.columns:
            continue
        n_bad = int(_as_float_series(df[c]).isna().sum())
        if n_bad:
            errs.append(f"{c}: {n_bad} missing values found")
    return errs


def check_unique_keys(df: pd.DataFrame, keys: Sequence[str]) -> list[str]:
    errs: list[str] = []
    missing = [k for k in keys if k not in df.columns]
    if missing:
        return errs

    dup_mask = df.duplicated(subset=list(keys), keep=False)
    n_dup = int(dup_mask.sum())
    if n_dup:
        sample = df.loc[dup_mask, list(keys)].head(10).to_dict(orient="records")
        errs.append(f"duplicate keys on {list(keys)}; dup_rows={n_dup}; sample={sample}")
    return errs


def validate_df(
    df: pd.DataFrame,
    *,
    schema: SchemaSpec | None = None,
    year_col: str | None = None,
    year_min: int | None = None,
    year_max: int | None = None,
    age_col: str | None = None,
    age_min: int = 0,
    age_max: int = 120,
    sex_col: str | None = None,
    sex_values: Iterable[str] = ("Female", "Male"),
    nonnegative_cols: Sequence[str] = (),
    required_values: Sequence[str] = (),
    unique_keys: Sequence[str] = (),
) -> CheckResult:
    """
    Generic validation runner.
    - validates required columns via schema (if provided)
    - validates year range (if year_col + bounds)
    - validates age range (if age_col)
    - validates sex labels (if sex_col)
    - validates nonnegativity, missing values and uniqueness (optional)
    """
    errors: list[str] = []

    if schema is not None:
        try:
            assert_schema(df, schema)
        except DataError as e:
            errors.append(str(e))
            # If schema fails, don't attempt downstream checks that may crash
            return CheckResult(ok=False, errors=tuple(errors))

    if year_col:
        errors.extend(check_year_range(df, col=year_col, min_year=year_min, max_year=year_max))

    if age_col:
        errors.extend(check_age_range(df, col=age_col, min_age=age_min, max_age=age_max))

    if sex_col:
        errors.extend(check_allowed_values(df, col=sex_col, allowed=sex_values))

    if nonnegative_cols:
        errors.extend(check_nonnegative(df, cols=list(nonnegative_cols)))

    if required_values:
        errors.extend(check_not_missing(df, cols=list(required_values)))

    if unique_keys:
        errors.extend(check_unique_keys(df, keys=list(unique_keys)))

    return CheckResult(ok=(len(errors) == 0), errors=tuple(errors))


# ---- Convenience wrappers ----

def validate_mortality_canonical(
    df: pd.DataFrame,
    *,
    start_year: int | None = None,
    max_age: int = 120,
) -> CheckResult:
    from mortcast.validation.schemas import MORTALITY_CANONICAL
    return validate_df(
        df,
        schema=MORTALITY_CANONICAL,
        year_col="Year",
        year_min=start_year,
        age_col="Age",
        age_min=0,
        age_max=max_age,
        sex_col="Sex",
        nonnegative_cols=("Deaths", "Population", "Mortality"),
        required_values=("Mortality",),
        unique_keys=("Region_Code", "Sex", "Age", "Year"),
    )


def validate_forecast_table(df: pd.DataFrame) -> CheckResult:
    from mortcast.validation.schemas import MORTALITY_FORECAST
    return validate_df(
        df,
        schema=MORTALITY_FORECAST,
        year_col="Year",
        age_col="Age",
        nonnegative_cols=("Mortality",),
        required_values=("Mortality",),
        unique_keys=("Region_Code", "Sex", "Age", "Year"),
    )
