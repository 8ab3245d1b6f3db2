"""Lee-Carter mortality modelling and forecasting."""

__version__ = "0.1.0"
