from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from .core.context import Kairos
from .core.date import KairosDate
from .core.parse import NOW
from .core.plugin import PluginArg
from .core.types import HolidayOccurrence, RuleSet

_context: Optional[Kairos] = None


def set_context(ctx: Kairos) -> None:
    global _context
    _context = ctx


def _ctx() -> Kairos:
    if _context is None:
        raise RuntimeError("Kairos context not initialized")
    return _context


def get_context() -> Kairos:
    return _ctx()


def kairos(value: Any = NOW) -> KairosDate:
    return _ctx()(value)


def now() -> KairosDate:
    return _ctx().now()


def use(plugins: PluginArg) -> Kairos:
    return _ctx().use(plugins)


def set_locale(code: str) -> str:
    _ctx().locales.set_locale(code)
    return code


def available_locales() -> List[str]:
    return _ctx().locales.available()


def list_plugins() -> List[str]:
    return _ctx().plugins


def _rules(locale: Optional[str], kind: str) -> RuleSet:
    return _ctx().locales.get_holidays(locale, kind)


def holidays(year: int, *, locale: Optional[str] = None, kind: str = "all") -> List[HolidayOccurrence]:
    """Observed holidays of year for a locale (current by default), in date order."""
    return _ctx().holiday_engine.holidays_for_year(year, _rules(locale, kind))


def is_holiday(value: Any, *, locale: Optional[str] = None, kind: str = "all") -> bool:
    d = _ctx()(value).raise_if_invalid().to_date()
    return _ctx().holiday_engine.is_holiday(d, _rules(locale, kind))


def get_holiday(value: Any, *, locale: Optional[str] = None, kind: str = "all") -> Optional[HolidayOccurrence]:
    d = _ctx()(value).raise_if_invalid().to_date()
    return _ctx().holiday_engine.get_holiday(d, _rules(locale, kind))


def next_holiday(value: Any = NOW, *, locale: Optional[str] = None, kind: str = "all") -> Optional[HolidayOccurrence]:
    d = _ctx()(value).raise_if_invalid().to_date()
    return _ctx().holiday_engine.next_holiday(d, _rules(locale, kind))


def previous_holiday(value: Any = NOW, *, locale: Optional[str] = None, kind: str = "all") -> Optional[HolidayOccurrence]:
    d = _ctx()(value).raise_if_invalid().to_date()
    return _ctx().holiday_engine.previous_holiday(d, _rules(locale, kind))


def easter(year: int, *, orthodox: bool = False) -> date:
    ctx = _ctx()
    return ctx.get_orthodox_easter(year) if orthodox else ctx.get_easter(year)
