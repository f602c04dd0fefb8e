"""kairos public API.

Immutable date values plus a plugin registry, a holiday rule engine with
pluggable calculators, locale data and business-day arithmetic.

    >>> import kairos
    >>> kairos.kairos("2024-07-04").is_holiday()
    True

Independent contexts are built with kairos.Kairos(); the module-level
helpers use a default context with every shipped plugin installed.
"""
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Initialize the default context on import
from . import api_init as _api_init  # noqa: F401,E402

from .api import (  # noqa: E402
    available_locales,
    easter,
    get_context,
    get_holiday,
    holidays,
    is_holiday,
    kairos,
    list_plugins,
    next_holiday,
    now,
    previous_holiday,
    set_context,
    set_locale,
    use,
)
from .bootstrap import build_default_context, default_plugins  # noqa: E402
from .config import KairosConfig  # noqa: E402
from .core.cache import LRUCache, memoize  # noqa: E402
from .core.context import Kairos  # noqa: E402
from .core.date import KairosDate  # noqa: E402
from .core.errors import (  # noqa: E402
    CalculatorNotFoundError,
    CycleDetectedError,
    InvalidInputError,
    InvalidRuleError,
    InvalidUnitError,
    KairosError,
    LocaleNotFoundError,
    MissingDependencyError,
    PluginInstallError,
)
from .core.locale import Locale  # noqa: E402
from .core.plugin import Plugin  # noqa: E402
from .core.types import HolidayOccurrence, HolidayRule, ObservedRule, RuleSet, RuleType  # noqa: E402

__all__ = [
    "kairos",
    "now",
    "use",
    "set_locale",
    "available_locales",
    "list_plugins",
    "holidays",
    "is_holiday",
    "get_holiday",
    "next_holiday",
    "previous_holiday",
    "easter",
    "get_context",
    "set_context",
    "build_default_context",
    "default_plugins",
    "Kairos",
    "KairosConfig",
    "KairosDate",
    "Locale",
    "Plugin",
    "LRUCache",
    "memoize",
    "HolidayRule",
    "HolidayOccurrence",
    "ObservedRule",
    "RuleSet",
    "RuleType",
    "KairosError",
    "InvalidInputError",
    "InvalidUnitError",
    "MissingDependencyError",
    "PluginInstallError",
    "CycleDetectedError",
    "LocaleNotFoundError",
    "InvalidRuleError",
    "CalculatorNotFoundError",
]
