from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, Dict, Optional, Sequence

from .time import weekday

_TOKEN_RE = re.compile(
    r"\[[^\]]*\]|YYYY|YY|MMMM|MMM|MM|M|Do|DD|D|dddd|ddd|dd|d|HH|H|hh|h|mm|m|ss|s|SSS|A|a"
)
_LONG_RE = re.compile(r"\[[^\]]*\]|LTS|LT|LLLL|LLL|LL|L")

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def english_ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    return f"{n}" + {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def english_meridiem(hour: int, minute: int, is_lower: bool) -> str:
    m = "AM" if hour < 12 else "PM"
    return m.lower() if is_lower else m


def format_datetime(dt: datetime, template: str, locale: Optional[object] = None) -> str:
    """
    Render dt with moment-style tokens.

    Names, ordinals and meridiem come from locale when given (any object with
    months, months_short, weekdays, weekdays_short, weekdays_min, ordinal and
    meridiem); otherwise English is used. Text in [brackets] is copied as-is. The long-date tokens LT, LTS and L to
    LLLL expand to the locale's formats first.
    """
    months: Sequence[str] = getattr(locale, "months", MONTHS)
    months_short: Sequence[str] = getattr(locale, "months_short", None) or [m[:3] for m in months]
    weekdays: Sequence[str] = getattr(locale, "weekdays", WEEKDAYS)
    weekdays_short: Sequence[str] = getattr(locale, "weekdays_short", None) or [w[:3] for w in weekdays]
    weekdays_min: Sequence[str] = getattr(locale, "weekdays_min", None) or [w[:2] for w in weekdays]
    ordinal: Callable[[int], str] = getattr(locale, "ordinal", english_ordinal)
    meridiem: Callable[[int, int, bool], str] = getattr(locale, "meridiem", english_meridiem)

    wd = weekday(dt.date())
    h12 = dt.hour % 12 or 12
    values: Dict[str, Callable[[], str]] = {
        "YYYY": lambda: f"{dt.year:04d}",
        "YY": lambda: f"{dt.year % 100:02d}",
        "MMMM": lambda: months[dt.month - 1],
        "MMM": lambda: months_short[dt.month - 1],
        "MM": lambda: f"{dt.month:02d}",
        "M": lambda: str(dt.month),
        "Do": lambda: ordinal(dt.day),
        "DD": lambda: f"{dt.day:02d}",
        "D": lambda: str(dt.day),
        "dddd": lambda: weekdays[wd],
        "ddd": lambda: weekdays_short[wd],
        "dd": lambda: weekdays_min[wd],
        "d": lambda: str(wd),
        "HH": lambda: f"{dt.hour:02d}",
        "H": lambda: str(dt.hour),
        "hh": lambda: f"{h12:02d}",
        "h": lambda: str(h12),
        "mm": lambda: f"{dt.minute:02d}",
        "m": lambda: str(dt.minute),
        "ss": lambda: f"{dt.second:02d}",
        "s": lambda: str(dt.second),
        "SSS": lambda: f"{dt.microsecond // 1000:03d}",
        "A": lambda: meridiem(dt.hour, dt.minute, False),
        "a": lambda: meridiem(dt.hour, dt.minute, True),
    }

    formats: Dict[str, str] = getattr(locale, "formats", None) or {}
    if formats:
        template = _LONG_RE.sub(lambda m: formats.get(m.group(0), m.group(0)), template)

    def sub(m: "re.Match[str]") -> str:
        tok = m.group(0)
        if tok.startswith("["):
            return tok[1:-1]
        return values[tok]()

    return _TOKEN_RE.sub(sub, template)
