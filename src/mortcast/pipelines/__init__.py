"""src/mortcast/pipelines/__init__.py"""

from .run_backtest import run_backtest
from .run_etl import run_etl
from .run_fit import run_fit
from .run_forecast import run_forecast

__all__ = [
    "run_backtest",
    "run_etl",
    "run_fit",
    "run_forecast",
]
