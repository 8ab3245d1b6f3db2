"""src/mortcast/io/readers.py"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import joblib
import pandas as pd

from mortcast.validation.schemas import FIT_REGISTRY, assert_schema


# ---------- generic helpers ----------

def read_csv(path: Path, *, dtype: Any = None) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Missing file:\n{path}")
    return pd.read_csv(path, dtype=dtype)


# ---------- domain-specific reads ----------

def read_mortality_raw(path: Path) -> pd.DataFrame:
    """
    Read a tidy mortality export (one row per region, sex, age, year).

    Column names are stripped; normalization to the canonical schema
    happens in mortcast.preprocessing.clean_mortality.
    Every column is read as text so open age groups like "110+" and
    leading-zero region codes survive; numeric parsing happens downstream.
    """
    df = read_csv(path, dtype=str)
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    return df


def read_fit_registry(path: Path) -> pd.DataFrame:
    """
    Registry of persisted fits:
        Region_Code, Sex, Model_Path
    """
    df = read_csv(path, dtype=dict(FIT_REGISTRY.dtype_hints))
    assert_schema(df, FIT_REGISTRY)
    df["Region_Code"] = df["Region_Code"].astype("string").str.strip()
    df["Sex"] = df["Sex"].astype("string").str.strip()
    return df


def read_model_artifact(path: Path) -> dict[str, Any]:
    """Load a joblib payload written by write_model_artifact."""
    if not path.exists():
        raise FileNotFoundError(f"Missing model artifact:\n{path}")
    payload = joblib.load(path)
    if not isinstance(payload, dict) or "model" not in payload:
        raise ValueError(f"Unexpected model artifact layout at {path}")
    return payload
