from __future__ import annotations
from datetime import date
from typing import Optional

from ...core.plugin import Plugin
from ...core.time import MAX_YEAR, MIN_YEAR, days_in_month, weekday
from ...core.types import HolidayRule, RuleType


def nth_weekday_of_month(year: int, month: int, wd: int, nth: int) -> Optional[date]:
    """
    nth occurrence of weekday wd (0 = Sunday) in month.

    nth > 0 counts from the first of the month, nth < 0 from the last day
    (-1 is the last occurrence). None if the month has fewer occurrences.
    """
    last = days_in_month(year, month)
    if nth > 0:
        first_wd = weekday(date(year, month, 1))
        day = 1 + (wd - first_wd) % 7 + (nth - 1) * 7
        return date(year, month, day) if day <= last else None
    last_wd = weekday(date(year, month, last))
    day = last - (last_wd - wd) % 7 - (-nth - 1) * 7
    return date(year, month, day) if day >= 1 else None


def calculate_nth_weekday(rule: HolidayRule, year: int, lookup=None) -> Optional[date]:
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    r = rule.rule
    return nth_weekday_of_month(year, r.month, r.weekday, r.nth)


def _install(kairos, utils) -> None:
    kairos.holiday_engine.register_calculator(RuleType.NTH_WEEKDAY, calculate_nth_weekday)


nth_weekday_calculator_plugin = Plugin(
    name="nth-weekday-calculator",
    version="1.0.0",
    dependencies=("holiday-engine",),
    install=_install,
    description="Nth weekday of a month (e.g. fourth Thursday of November)",
)
