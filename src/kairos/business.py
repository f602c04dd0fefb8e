"""
Business-day arithmetic on date values.

A business day is a day that is neither a weekend day (config.weekends,
0 = Sunday) nor an observed holiday of the rule set in use (the current
locale's by default).
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, List, Optional

from .core.date import KairosDate
from .core.plugin import Plugin
from .core.time import MAX_YEAR, MIN_YEAR, days_in_month, weekday
from .core.types import RuleSet


class BusinessCalendar:
    def __init__(self, engine, weekends, rules: Any = None):
        self.engine = engine
        self.weekends = frozenset(weekends)
        self.rules = None if rules is None else RuleSet.of(rules)

    def is_weekend(self, d: date) -> bool:
        return weekday(d) in self.weekends

    def is_holiday(self, d: date) -> bool:
        return self.engine.is_holiday(d, self.rules)

    def is_business_day(self, d: date) -> bool:
        if self.is_weekend(d):
            return False
        return not self.is_holiday(d)

    def _step(self, d: date, step: int) -> Optional[date]:
        """Nearest business day strictly after (step=1) or before (step=-1) d."""
        try:
            current = d + timedelta(days=step)
            while not self.is_business_day(current):
                current += timedelta(days=step)
        except OverflowError:
            return None
        return current

    def next_business_day(self, d: date) -> Optional[date]:
        """First business day strictly after d; None past 9999-12-31."""
        return self._step(d, 1)

    def previous_business_day(self, d: date) -> Optional[date]:
        return self._step(d, -1)

    def add_business_days(self, start: date, days: int) -> Optional[date]:
        step = 1 if days > 0 else -1
        current: Optional[date] = start
        for _ in range(abs(days)):
            current = self._step(current, step)
            if current is None:
                break
        return current

    def business_days_between(self, start: date, end: date) -> int:
        """Business days in (start, end]; negative when end precedes start."""
        lo, hi, sign = (start, end, 1) if start <= end else (end, start, -1)
        count = sum(
            1
            for n in range(lo.toordinal() + 1, hi.toordinal() + 1)
            if self.is_business_day(date.fromordinal(n))
        )
        return sign * count

    def business_days_in_month(self, year: int, month: int) -> List[date]:
        return [
            d
            for d in (date(year, month, i) for i in range(1, days_in_month(year, month) + 1))
            if self.is_business_day(d)
        ]


def _calendar(self, rules: Any = None) -> BusinessCalendar:
    ctx = self.context
    if isinstance(rules, str):
        rules = ctx.locales.get_holidays(kind=rules)
    return BusinessCalendar(ctx.holiday_engine, ctx.config.weekends, rules)


def _shifted(self, method: str, *args, rules: Any = None):
    d = self.to_date()
    if d is None:
        return self.clone()
    result = getattr(_calendar(self, rules), method)(d, *args)
    if result is None:
        return KairosDate._invalid(self.context, f"No business day within years {MIN_YEAR}..{MAX_YEAR}")
    return self.context(result)


def _is_business_day(self, rules: Any = None) -> bool:
    d = self.to_date()
    return d is not None and _calendar(self, rules).is_business_day(d)


def _is_weekend(self) -> bool:
    d = self.to_date()
    return d is not None and weekday(d) in self.context.config.weekends


def _next_business_day(self, rules: Any = None):
    return _shifted(self, "next_business_day", rules=rules)


def _previous_business_day(self, rules: Any = None):
    return _shifted(self, "previous_business_day", rules=rules)


def _add_business_days(self, days: int, rules: Any = None):
    return _shifted(self, "add_business_days", days, rules=rules)


def _business_days_between(self, other: Any, rules: Any = None) -> Optional[int]:
    start, end = self.to_date(), self.context(other).to_date()
    if start is None or end is None:
        return None
    return _calendar(self, rules).business_days_between(start, end)


def _install(kairos, utils) -> None:
    def business_days_in_month(year: int, month: int, rules: Any = None) -> int:
        if isinstance(rules, str):
            rules = kairos.locales.get_holidays(kind=rules)
        cal = BusinessCalendar(kairos.holiday_engine, kairos.config.weekends, rules)
        return len(cal.business_days_in_month(year, month))

    kairos.add_static({"business_days_in_month": business_days_in_month})


business_plugin = Plugin(
    name="business",
    version="1.0.0",
    dependencies=("holiday-engine",),
    install=_install,
    methods={
        "is_business_day": _is_business_day,
        "is_weekend": _is_weekend,
        "next_business_day": _next_business_day,
        "previous_business_day": _previous_business_day,
        "add_business_days": _add_business_days,
        "business_days_between": _business_days_between,
    },
    description="Business-day arithmetic using the holiday engine",
)
