"""src/mortcast/modeling/__init__.py"""

from .batch import fit_groups, forecast_groups
from .evaluation import MetricPack, backtest_lee_carter, compute_metrics, coverage
from .lee_carter import ADJUST_METHODS, LeeCarterFit, fit_lee_carter
from .lifetable import life_expectancy, life_table
from .random_walk import RandomWalkDrift, fit_random_walk

__all__ = [
    "ADJUST_METHODS",
    "LeeCarterFit",
    "fit_lee_carter",
    "RandomWalkDrift",
    "fit_random_walk",
    "fit_groups",
    "forecast_groups",
    "life_table",
    "life_expectancy",
    "MetricPack",
    "compute_metrics",
    "coverage",
    "backtest_lee_carter",
]
