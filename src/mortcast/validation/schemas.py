"""src/mortcast/validation/schemas.py"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from mortcast.errors import DataError


@dataclass(frozen=True)
class SchemaSpec:
    """Minimal schema specification for a DataFrame."""
    name: str
    required_cols: tuple[str, ...]
    dtype_hints: dict[str, str] | None = None  # e.g. {"Year": "int", "Sex": "string"}


def _missing_cols(df: pd.DataFrame, required: Iterable[str]) -> list[str]:
    req = list(required)
    return [c for c in req if c not in df.columns]


# ---- Canonical schema specs ----

MORTALITY_CANONICAL = SchemaSpec(
    name="mortality_canonical",
    required_cols=("Region_Code", "Sex", "Age", "Year", "Deaths", "Population", "Mortality"),
    dtype_hints={
        "Region_Code": "string",
        "Sex": "string",
        "Age": "int",
        "Year": "int",
        "Deaths": "float",
        "Population": "float",
        "Mortality": "float",
    },
)

AGE_COMPONENTS = SchemaSpec(
    name="lee_carter_age_components",
    required_cols=("Region_Code", "Sex", "Age", "ax", "bx"),
    dtype_hints={"Region_Code": "string", "Sex": "string", "Age": "int", "ax": "float", "bx": "float"},
)

TIME_COMPONENTS = SchemaSpec(
    name="lee_carter_time_components",
    required_cols=("Region_Code", "Sex", "Year", "kt"),
    dtype_hints={"Region_Code": "string", "Sex": "string", "Year": "int", "kt": "float"},
)

MORTALITY_FORECAST = SchemaSpec(
    name="mortality_forecast",
    required_cols=("Region_Code", "Sex", "Age", "Year", "Mortality"),
    dtype_hints={"Region_Code": "string", "Sex": "string", "Age": "int", "Year": "int", "Mortality": "float"},
)

FIT_REGISTRY = SchemaSpec(
    name="lee_carter_fit_registry",
    required_cols=("Region_Code", "Sex", "Model_Path"),
    dtype_hints={"Region_Code": "string", "Sex": "string", "Model_Path": "string"},
)


def assert_schema(df: pd.DataFrame, spec: SchemaSpec) -> None:
    """Raise a DataError if required columns are missing."""
    missing = _missing_cols(df, spec.required_cols)
    if missing:
        raise DataError(
            f"{spec.name}: missing columns {missing}. Found: {list(df.columns)}",
            context={"schema": spec.name, "missing": missing},
        )
