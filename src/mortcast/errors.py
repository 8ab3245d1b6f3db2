"""
Error taxonomy for mortality model fitting and forecasting.

Every error carries an optional ``context`` dict (group key, offending cells,
option values) so pipelines can log what failed without parsing messages.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class MortcastError(Exception):
    """Base class for all mortcast errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class DataError(MortcastError, ValueError):
    """Input mortality data cannot be modelled (missing, non-positive, duplicated or gapped cells)."""


class ConvergenceError(MortcastError, RuntimeError):
    """The decomposition or an adjustment step is degenerate or did not converge."""


class InvalidArgument(MortcastError, ValueError):
    """A caller-supplied option is out of range or unknown."""


__all__ = [
    "MortcastError",
    "DataError",
    "ConvergenceError",
    "InvalidArgument",
]
