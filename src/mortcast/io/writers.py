"""src/mortcast/io/writers.py"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import joblib
import pandas as pd


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def write_csv(df: pd.DataFrame, path: Path, *, index: bool = False) -> Path:
    """Write DataFrame to CSV (ensures parent folder exists)."""
    ensure_parent_dir(path)
    df.to_csv(path, index=index)
    return path


def write_model_artifact(payload: dict[str, Any], path: Path) -> Path:
    """Persist a fitted-model payload ({"model": ..., metadata...}) with joblib."""
    if "model" not in payload:
        raise ValueError("model artifact payload needs a 'model' entry")
    ensure_parent_dir(path)
    joblib.dump(payload, path)
    return path
