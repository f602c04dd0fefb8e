"""One calculator plugin per holiday rule kind."""
from .custom import custom_calculator_plugin
from .easter import easter_calculator_plugin
from .fixed import fixed_calculator_plugin
from .lunar import lunar_calculator_plugin
from .nth_weekday import nth_weekday_calculator_plugin
from .relative import relative_calculator_plugin

CALCULATOR_PLUGINS = (
    fixed_calculator_plugin,
    nth_weekday_calculator_plugin,
    easter_calculator_plugin,
    lunar_calculator_plugin,
    relative_calculator_plugin,
    custom_calculator_plugin,
)

__all__ = [
    "CALCULATOR_PLUGINS",
    "custom_calculator_plugin",
    "easter_calculator_plugin",
    "fixed_calculator_plugin",
    "lunar_calculator_plugin",
    "nth_weekday_calculator_plugin",
    "relative_calculator_plugin",
]
