"""Holiday rule engine, rule builders and calculator plugins."""
from .engine import HolidayEngine, apply_observed, holiday_engine_plugin
from .calculators import CALCULATOR_PLUGINS

HOLIDAY_PLUGINS = (holiday_engine_plugin, *CALCULATOR_PLUGINS)

__all__ = ["HolidayEngine", "apply_observed", "holiday_engine_plugin", "CALCULATOR_PLUGINS", "HOLIDAY_PLUGINS"]
