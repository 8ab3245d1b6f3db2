"""src/mortcast/forecasting/__init__.py"""

from .intervals import IntervalResult, normal_pi, z_from_level
from .lee_carter_forecast import JUMP_OFF_CHOICES, Forecast, forecast_lee_carter, jump_off_origin

__all__ = [
    "IntervalResult",
    "normal_pi",
    "z_from_level",
    "Forecast",
    "JUMP_OFF_CHOICES",
    "forecast_lee_carter",
    "jump_off_origin",
]
