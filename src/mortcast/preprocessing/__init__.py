"""src/mortcast/preprocessing/__init__.py"""

from .clean_mortality import clean_mortality, collapse_ages, parse_age_labels

__all__ = [
    "clean_mortality",
    "collapse_ages",
    "parse_age_labels",
]
