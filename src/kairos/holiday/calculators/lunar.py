from __future__ import annotations
from datetime import date, timedelta
from typing import Dict, Mapping, Optional, Protocol, Sequence

from ...core.errors import InvalidRuleError
from ...core.plugin import Plugin
from ...core.time import MAX_YEAR, MIN_YEAR
from ...core.types import HolidayRule, RuleType
from ...reference.chinese import chinese_to_gregorian


class LunarConverter(Protocol):
    """Maps a date of a lunar calendar to the Gregorian calendar."""
    def to_gregorian(self, lunar_year: int, month: int, day: int, leap: bool = False) -> Optional[date]: ...


class ChineseConverter:
    """Astronomical Chinese calendar (new moons and solar terms at UTC+8)."""

    def to_gregorian(self, lunar_year: int, month: int, day: int, leap: bool = False) -> Optional[date]:
        return chinese_to_gregorian(lunar_year, month, day, leap)


class TableLunarConverter:
    """
    Lunar calendar driven by a table of new-year dates.

    Months alternate in length following month_lengths (30, 29 by default)
    and there are no leap months. Years missing from the table have no dates.
    """

    def __init__(self, new_years: Mapping[int, date], month_lengths: Sequence[int] = (30, 29)):
        if not month_lengths or any(n < 1 for n in month_lengths):
            raise ValueError("month_lengths must be positive")
        self.new_years = dict(new_years)
        self.month_lengths = tuple(month_lengths)

    def to_gregorian(self, lunar_year: int, month: int, day: int, leap: bool = False) -> Optional[date]:
        start = self.new_years.get(lunar_year)
        if start is None or leap:
            return None
        lengths = [self.month_lengths[i % len(self.month_lengths)] for i in range(month)]
        if day > lengths[-1]:
            return None
        return start + timedelta(days=sum(lengths[:-1]) + day - 1)


class LunarCalculator:
    """
    Calculator for lunar-based rules.

    A lunar date recurs once per lunar year, which straddles two Gregorian
    years, so the lunar years starting in year-1 and year are both tried and
    the date landing in year is kept.
    """

    def __init__(self, converters: Optional[Dict[str, LunarConverter]] = None):
        self.converters: Dict[str, LunarConverter] = dict(converters or {"chinese": ChineseConverter()})

    def register(self, name: str, converter: LunarConverter) -> None:
        self.converters[name] = converter

    def __call__(self, rule: HolidayRule, year: int, lookup=None) -> Optional[date]:
        r = rule.rule
        conv = self.converters.get(r.calendar)
        if conv is None:
            raise InvalidRuleError(
                f"Unknown lunar calendar '{r.calendar}' in rule '{rule.name}'. Available: {sorted(self.converters)}"
            )
        for lunar_year in (year - 1, year):
            if not MIN_YEAR < lunar_year < MAX_YEAR:
                continue
            d = conv.to_gregorian(lunar_year, r.month, r.day, r.leap)
            if d is None:
                continue
            d += timedelta(days=r.offset)
            if d.year == year:
                return d
        return None


def _install(kairos, utils) -> None:
    calc = LunarCalculator()
    kairos.holiday_engine.register_calculator(RuleType.LUNAR_BASED, calc)
    kairos.add_static(
        {
            "lunar_calculator": calc,
            "register_lunar_calendar": calc.register,
        }
    )


lunar_calculator_plugin = Plugin(
    name="lunar-calculator",
    version="1.0.0",
    dependencies=("holiday-engine",),
    install=_install,
    description="Holidays on lunar calendar dates (Chinese calendar built in)",
)
