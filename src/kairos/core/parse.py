"""
Input normalization for date values.

parse_input() turns any supported input into epoch milliseconds plus a tuple
of validation messages. It never raises: unparseable input yields
(None, messages) and the caller stores that as an invalid date.
"""
from __future__ import annotations

import math
import re
import time
from datetime import date, datetime, tzinfo
from typing import Any, Mapping, Optional, Tuple

from .time import MAX_YEAR, MIN_YEAR, datetime_to_ms, days_in_month, wall_to_ms


class _Now:
    def __repr__(self) -> str:
        return "NOW"


NOW: Any = _Now()

Parsed = Tuple[Optional[int], Tuple[str, ...]]

_DATE_ONLY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_EUROPEAN_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")

COMPONENT_FIELDS = ("year", "month", "day", "hour", "minute", "second", "millisecond")
_TIME_LIMITS = {"hour": 23, "minute": 59, "second": 59, "millisecond": 999}


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def _invalid(*messages: str) -> Parsed:
    return None, tuple(messages)


def _validated_calendar_day(year: int, month: int, day: int) -> Tuple[str, ...]:
    errors = []
    if not MIN_YEAR <= year <= MAX_YEAR:
        errors.append(f"year {year} out of range {MIN_YEAR}..{MAX_YEAR}")
    if not 1 <= month <= 12:
        errors.append(f"month {month} out of range 1..12")
    elif not 1 <= day <= days_in_month(year, month):
        errors.append(f"day {day} out of range for {year:04d}-{month:02d}")
    return tuple(errors)


def _from_day(year: int, month: int, day: int, tz: tzinfo, source: str) -> Parsed:
    errors = _validated_calendar_day(year, month, day)
    if errors:
        return _invalid(f"Invalid date: {source!r}", *errors)
    return wall_to_ms(tz, year, month, day), ()


def parse_string(text: str, tz: tzinfo) -> Parsed:
    s = text.strip()
    if not s or s.lower() == "invalid":
        return _invalid(f"Invalid date string: {text!r}")

    m = _DATE_ONLY_RE.match(s)
    if m:
        y, mo, d = (int(g) for g in m.groups())
        return _from_day(y, mo, d, tz, text)

    m = _EUROPEAN_RE.match(s)
    if m:
        d, mo, y = (int(g) for g in m.groups())
        return _from_day(y, mo, d, tz, text)

    iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
    try:
        dt = datetime.fromisoformat(iso)
    except ValueError:
        return _invalid(f"Unable to parse date string: {text!r}")
    return parse_datetime(dt, tz)


def parse_datetime(dt: datetime, tz: tzinfo) -> Parsed:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return datetime_to_ms(dt), ()


def parse_number(value: float) -> Parsed:
    if isinstance(value, float) and not math.isfinite(value):
        return _invalid(f"Invalid timestamp: {value!r}")
    return int(value), ()


def parse_components(data: Mapping[str, Any], tz: tzinfo) -> Parsed:
    errors = []
    unknown = sorted(set(data) - set(COMPONENT_FIELDS), key=repr)
    if unknown:
        errors.append(f"unknown component(s): {', '.join(map(repr, unknown))}")
    values = {}
    for name in COMPONENT_FIELDS:
        v = data.get(name)
        if v is None:
            if name in ("year", "month", "day"):
                errors.append(f"missing component '{name}'")
            continue
        if isinstance(v, bool) or not isinstance(v, int):
            errors.append(f"component '{name}' must be an integer, got {v!r}")
            continue
        values[name] = v
    if errors:
        return _invalid("Invalid date components", *errors)

    errors.extend(_validated_calendar_day(values["year"], values["month"], values["day"]))
    for name, upper in _TIME_LIMITS.items():
        v = values.get(name, 0)
        if not 0 <= v <= upper:
            errors.append(f"{name} {v} out of range 0..{upper}")
    if errors:
        return _invalid("Invalid date components", *errors)
    return wall_to_ms(tz, **values), ()


def parse_input(value: Any, tz: tzinfo) -> Parsed:
    """Normalize value to (epoch_ms | None, errors)."""
    if value is NOW:
        return now_ms(), ()
    if value is None:
        return _invalid("Invalid date input: None")
    if isinstance(value, bool):
        return _invalid(f"Invalid date input: {value!r}")
    if isinstance(value, (int, float)):
        return parse_number(value)
    if isinstance(value, str):
        return parse_string(value, tz)
    if isinstance(value, datetime):
        return parse_datetime(value, tz)
    if isinstance(value, date):
        return _from_day(value.year, value.month, value.day, tz, value.isoformat())
    if isinstance(value, Mapping):
        return parse_components(value, tz)
    return _invalid(f"Unsupported date input type: {type(value).__name__}")


def parse_or_invalid(value: Any, tz: tzinfo) -> Parsed:
    """parse_input() that also turns out-of-range instants and type errors into invalid results."""
    try:
        return parse_input(value, tz)
    except (OverflowError, ValueError) as exc:
        return _invalid(f"Date out of range: {exc}")
    except TypeError as exc:
        return _invalid(f"Invalid date input: {exc}")


def validate_input(value: Any, kind: str) -> bool:
    """Cheap type check used by plugins: kind is 'date', 'number', 'string' or 'year'."""
    if kind == "date":
        if isinstance(value, (date, datetime)):
            return True
        is_valid = getattr(value, "is_valid", None)
        return callable(is_valid) and bool(is_valid())
    if kind == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
    if kind == "string":
        return isinstance(value, str)
    if kind == "year":
        return isinstance(value, int) and not isinstance(value, bool) and MIN_YEAR <= value <= MAX_YEAR
    return False
