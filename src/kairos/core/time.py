from __future__ import annotations
from datetime import date, datetime, timedelta, timezone, tzinfo

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

MIN_YEAR = 1
MAX_YEAR = 9999


def to_jdn(d: date) -> int:
    """Convert Gregorian date to Julian Day Number (JDN)."""
    y, m, day = d.year, d.month, d.day
    a = (14 - m) // 12
    y2 = y + 4800 - a
    m2 = m + 12 * a - 3
    jdn = day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045
    return jdn

def from_jdn(jdn: int) -> date:
    """Fliegel-Van Flandern inverse of to_jdn (Gregorian)."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return date(year, month, day)

def julian_to_jdn(year: int, month: int, day: int) -> int:
    """JDN of a date in the Julian calendar."""
    a = (14 - month) // 12
    y2 = year + 4800 - a
    m2 = month + 12 * a - 3
    return day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - 32083


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)

def days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31

def weekday(d: date) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    return (to_jdn(d) + 1) % 7

def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    """Shift (year, month) by a signed number of months."""
    total = year * 12 + (month - 1) + months
    return total // 12, total % 12 + 1


# ------------------------------------------------------------
# Epoch milliseconds <-> aware datetimes
# ------------------------------------------------------------

def ms_to_datetime(ms: int, tz: tzinfo) -> datetime:
    """Epoch milliseconds -> aware datetime in tz. Raises OverflowError out of range."""
    return (EPOCH + timedelta(milliseconds=ms)).astimezone(tz)

def datetime_to_ms(dt: datetime) -> int:
    """Aware datetime -> epoch milliseconds (floor)."""
    return (dt - EPOCH) // timedelta(milliseconds=1)

def wall_to_ms(
    tz: tzinfo,
    year: int,
    month: int = 1,
    day: int = 1,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> int:
    """
    Wall-clock components in tz -> epoch milliseconds.

    Every field after year may be out of range and rolls over into the next
    larger unit (month 13 -> January of the next year, day 0 -> last day of
    the previous month, hour 25 -> next day 01:00, ...).
    """
    y, m = add_months(year, 1, month - 1)
    base = date(y, m, 1)
    offset = timedelta(
        days=day - 1,
        hours=hour,
        minutes=minute,
        seconds=second,
        milliseconds=millisecond,
    )
    naive = datetime(base.year, base.month, base.day) + offset
    return datetime_to_ms(naive.replace(tzinfo=tz))
