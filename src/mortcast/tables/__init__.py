"""src/mortcast/tables/__init__.py"""

from .series import MortalitySeries
from .vital import GroupKey, VitalRoles, VitalTable

__all__ = [
    "GroupKey",
    "MortalitySeries",
    "VitalRoles",
    "VitalTable",
]
