from __future__ import annotations
from datetime import date, timedelta
from typing import Optional

from ...core.plugin import Plugin
from ...core.types import HolidayRule, RuleType


def calculate_relative(rule: HolidayRule, year: int, lookup) -> Optional[date]:
    """
    offset days from the referenced rule's nominal date in the same year.

    The lookup resolves the reference within the current rule set and raises
    CycleDetectedError when the chain of references loops.
    """
    base = lookup.resolve(rule.rule.relative_to)
    if base is None:
        return None
    try:
        return base + timedelta(days=rule.rule.offset)
    except OverflowError:
        return None


def _install(kairos, utils) -> None:
    kairos.holiday_engine.register_calculator(RuleType.RELATIVE, calculate_relative)


relative_calculator_plugin = Plugin(
    name="relative-calculator",
    version="1.0.0",
    dependencies=("holiday-engine",),
    install=_install,
    description="Holidays defined as an offset from another holiday",
)
