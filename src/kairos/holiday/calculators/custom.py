from __future__ import annotations
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Optional

from ...core.errors import InvalidRuleError
from ...core.plugin import Plugin
from ...core.types import HolidayRule, RuleType
from ...reference.astro import jd_to_datetime_utc, jd_tt_to_jd_utc, season_jd_tt


def calculate_custom(rule: HolidayRule, year: int, lookup=None) -> Optional[date]:
    """Call the rule's own function with year; it returns a date-like value or None."""
    try:
        result = rule.rule.calculate(year)
    except Exception as exc:
        raise InvalidRuleError(f"Custom rule '{rule.name}' failed for {year}: {exc}") from exc
    if result is None:
        return None
    if isinstance(result, datetime):
        return result.date()
    if isinstance(result, date):
        return result
    to_date = getattr(result, "to_date", None)
    if callable(to_date):
        return to_date()
    raise InvalidRuleError(
        f"Custom rule '{rule.name}' must return a date or None, got {type(result).__name__}"
    )


# ------------------------------------------------------------
# Astronomical helpers for custom rules
# ------------------------------------------------------------

def _season_date(year: int, longitude: float, tz: Optional[tzinfo]) -> date:
    jd_utc = jd_tt_to_jd_utc(season_jd_tt(year, longitude))
    return jd_to_datetime_utc(jd_utc).astimezone(tz or timezone.utc).date()


def vernal_equinox(year: int, tz: Optional[tzinfo] = None) -> date:
    """Civil date of the March equinox in tz (UTC by default)."""
    return _season_date(year, 0.0, tz)


def summer_solstice(year: int, tz: Optional[tzinfo] = None) -> date:
    return _season_date(year, 90.0, tz)


def autumnal_equinox(year: int, tz: Optional[tzinfo] = None) -> date:
    """Civil date of the September equinox in tz (UTC by default)."""
    return _season_date(year, 180.0, tz)


def winter_solstice(year: int, tz: Optional[tzinfo] = None) -> date:
    return _season_date(year, 270.0, tz)


def _install(kairos: Any, utils) -> None:
    kairos.holiday_engine.register_calculator(RuleType.CUSTOM, calculate_custom)
    kairos.add_static(
        {
            "vernal_equinox": vernal_equinox,
            "summer_solstice": summer_solstice,
            "autumnal_equinox": autumnal_equinox,
            "winter_solstice": winter_solstice,
        }
    )


custom_calculator_plugin = Plugin(
    name="custom-calculator",
    version="1.0.0",
    dependencies=("holiday-engine",),
    install=_install,
    description="Holidays computed by user functions, plus equinox and solstice helpers",
)
