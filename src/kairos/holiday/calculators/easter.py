from __future__ import annotations
from datetime import date, timedelta
from typing import Optional

from ...core.plugin import Plugin
from ...core.time import MAX_YEAR, from_jdn, julian_to_jdn
from ...core.types import HolidayRule, RuleType

GREGORIAN_REFORM_YEAR = 1583


def _julian_computus(year: int) -> tuple[int, int]:
    """Month and day of Easter Sunday in the Julian calendar (Meeus)."""
    a = year % 4
    b = year % 7
    c = year % 19
    d = (19 * c + 15) % 30
    e = (2 * a + 4 * b - d + 34) % 7
    month = (d + e + 114) // 31
    day = (d + e + 114) % 31 + 1
    return month, day


def gregorian_easter(year: int) -> date:
    """
    Western Easter Sunday.

    Anonymous Gregorian algorithm (Meeus/Jones/Butcher) from 1583; earlier
    years use the Julian computus, expressed as a proleptic Gregorian date.
    """
    if year < GREGORIAN_REFORM_YEAR:
        return from_jdn(julian_to_jdn(year, *_julian_computus(year)))
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = (h + l - 7 * m + 114) % 31 + 1
    return date(year, month, day)


def orthodox_easter(year: int) -> date:
    """Eastern Orthodox Easter Sunday (Julian computus) as a Gregorian date."""
    return from_jdn(julian_to_jdn(year, *_julian_computus(year)))


def calculate_easter(rule: HolidayRule, year: int, lookup=None) -> Optional[date]:
    if not 1 <= year <= MAX_YEAR:
        return None
    r = rule.rule
    anchor = orthodox_easter(year) if r.orthodox else gregorian_easter(year)
    try:
        return anchor + timedelta(days=r.offset)
    except OverflowError:
        return None


def _install(kairos, utils) -> None:
    kairos.holiday_engine.register_calculator(RuleType.EASTER_BASED, calculate_easter)
    kairos.add_static(
        {
            "get_easter": utils.memoize(gregorian_easter, max_size=256),
            "get_orthodox_easter": utils.memoize(orthodox_easter, max_size=256),
        }
    )


easter_calculator_plugin = Plugin(
    name="easter-calculator",
    version="1.0.0",
    dependencies=("holiday-engine",),
    install=_install,
    description="Holidays relative to Western or Orthodox Easter",
)
