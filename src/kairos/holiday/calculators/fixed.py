from __future__ import annotations
from datetime import date
from typing import Optional

from ...core.plugin import Plugin
from ...core.time import MAX_YEAR, MIN_YEAR, days_in_month
from ...core.types import HolidayRule, RuleType


def calculate_fixed(rule: HolidayRule, year: int, lookup=None) -> Optional[date]:
    """Same month/day every year; None when the day does not exist (Feb 29 in common years)."""
    r = rule.rule
    if not MIN_YEAR <= year <= MAX_YEAR or r.day > days_in_month(year, r.month):
        return None
    return date(year, r.month, r.day)


def _install(kairos, utils) -> None:
    kairos.holiday_engine.register_calculator(RuleType.FIXED, calculate_fixed)


fixed_calculator_plugin = Plugin(
    name="fixed-calculator",
    version="1.0.0",
    dependencies=("holiday-engine",),
    install=_install,
    description="Fixed month/day holidays",
)
