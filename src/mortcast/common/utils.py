"""
src/mortcast/common/utils.py

mortcast.common.utils

Small helpers shared by the pipelines for reading config sections.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


def safe_int(value: Any, default: int) -> int:
    """Best-effort int conversion with fallback."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def safe_float(value: Any, default: float) -> float:
    """Best-effort float conversion with fallback."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def get_option(section: Any, key: str, default: Any = None) -> Any:
    """Support both dict-style and attribute-style config sections."""
    if section is None:
        return default
    if isinstance(section, dict):
        v = section.get(key, default)
        return default if v is None else v
    if hasattr(section, key):
        v = getattr(section, key)
        return default if v is None else v
    return default


def resolve_path(project_root: Path, maybe_path: str | Path) -> Path:
    """Resolve relative paths against the project root."""
    p = Path(maybe_path)
    return p if p.is_absolute() else (Path(project_root) / p).resolve()
