"""src/mortcast/io/__init__.py"""
from .db import connect, ensure_index, read_query, read_table, table_exists, write_table
from .readers import read_csv, read_fit_registry, read_model_artifact, read_mortality_raw
from .writers import ensure_parent_dir, write_csv, write_model_artifact

__all__ = [
    "connect",
    "ensure_index",
    "read_query",
    "read_table",
    "table_exists",
    "write_table",
    "read_csv",
    "read_fit_registry",
    "read_model_artifact",
    "read_mortality_raw",
    "ensure_parent_dir",
    "write_csv",
    "write_model_artifact",
]
