"""
Chinese lunisolar calendar from astronomical new moons and solar terms.

Months start on the civil day (UTC+8) of the true new moon. The sui running
from one 11th month (the one holding the winter solstice) to the next has 12
or 13 months; in a 13-month sui the first month without a principal term
(solar longitude multiple of 30 deg) is the leap month and repeats the
number of the month before it.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

from ..core.cache import memoize
from .astro import (
    datetime_utc_to_jd,
    jd_utc_to_jd_tt,
    jde_true_new_moon,
    local_date,
    lunation_near,
    season_jd_tt,
    solar_longitude,
)

UTC_OFFSET_HOURS = 8.0


@dataclass(frozen=True)
class LunarMonth:
    number: int
    leap: bool
    start: date
    length: int


def new_moon_date(k: int) -> date:
    return local_date(jde_true_new_moon(k), UTC_OFFSET_HOURS)


def _midnight_jd_utc(d: date) -> float:
    return datetime_utc_to_jd(datetime(d.year, d.month, d.day, tzinfo=timezone.utc)) - UTC_OFFSET_HOURS / 24.0


def _lunation_on_or_before(d: date) -> int:
    k = lunation_near(jd_utc_to_jd_tt(_midnight_jd_utc(d)))
    while new_moon_date(k) > d:
        k -= 1
    while new_moon_date(k + 1) <= d:
        k += 1
    return k


def winter_solstice_date(year: int) -> date:
    return local_date(season_jd_tt(year, 270.0), UTC_OFFSET_HOURS)


def _principal_term(d: date) -> int:
    """Index of the last principal term reached by local midnight starting d."""
    jd_tt = jd_utc_to_jd_tt(_midnight_jd_utc(d))
    return int(solar_longitude(jd_tt).L_app_deg // 30.0)


@memoize(max_size=64)
def sui_months(year: int) -> Tuple[LunarMonth, ...]:
    """Months from the 11th month of year-1 up to (excluding) the 11th month of year."""
    k0 = _lunation_on_or_before(winter_solstice_date(year - 1))
    k1 = _lunation_on_or_before(winter_solstice_date(year))
    starts = [new_moon_date(k) for k in range(k0, k1 + 1)]
    n = k1 - k0

    leap_index = None
    if n == 13:
        for i in range(1, n):
            if _principal_term(starts[i]) == _principal_term(starts[i + 1]):
                leap_index = i
                break

    months = []
    number = 11
    for i in range(n):
        leap = i == leap_index
        if i > 0 and not leap:
            number = number % 12 + 1
        months.append(LunarMonth(number, leap, starts[i], (starts[i + 1] - starts[i]).days))
    return tuple(months)


def _new_year_index(months: Tuple[LunarMonth, ...]) -> int:
    for i, m in enumerate(months):
        if i > 0 and m.number == 1 and not m.leap:
            return i
    raise ValueError("sui without a first month")


@memoize(max_size=64)
def lunar_year_months(year: int) -> Tuple[LunarMonth, ...]:
    """Months of the lunar year whose first month starts in Gregorian year."""
    this, nxt = sui_months(year), sui_months(year + 1)
    return this[_new_year_index(this):] + nxt[:_new_year_index(nxt)]


def chinese_to_gregorian(lunar_year: int, month: int, day: int, leap: bool = False) -> Optional[date]:
    """Gregorian date of a Chinese calendar date, or None if it does not exist."""
    for m in lunar_year_months(lunar_year):
        if m.number == month and m.leap == leap:
            return m.start + timedelta(days=day - 1) if 1 <= day <= m.length else None
    return None


def chinese_new_year(year: int) -> date:
    return lunar_year_months(year)[0].start
