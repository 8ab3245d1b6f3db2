"""src/mortcast/validation/__init__.py"""

from __future__ import annotations

from .checks import (
    CheckResult,
    validate_df,
    validate_forecast_table,
    validate_mortality_canonical,
)
from .schemas import (
    AGE_COMPONENTS,
    FIT_REGISTRY,
    MORTALITY_CANONICAL,
    MORTALITY_FORECAST,
    TIME_COMPONENTS,
    SchemaSpec,
    assert_schema,
)

__all__ = [
    # checks
    "CheckResult",
    "validate_df",
    "validate_forecast_table",
    "validate_mortality_canonical",
    # schemas
    "SchemaSpec",
    "assert_schema",
    "MORTALITY_CANONICAL",
    "AGE_COMPONENTS",
    "TIME_COMPONENTS",
    "MORTALITY_FORECAST",
    "FIT_REGISTRY",
]
