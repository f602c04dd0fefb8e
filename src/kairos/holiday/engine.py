from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple, Union

from ..core.cache import LRUCache
from ..core.errors import CalculatorNotFoundError, CycleDetectedError, InvalidRuleError
from ..core.locale import LocaleManager
from ..core.plugin import Plugin
from ..core.time import MAX_YEAR, MIN_YEAR, weekday
from ..core.types import HolidayOccurrence, HolidayRule, ObservedRule, RuleSet, RuleType

logger = logging.getLogger(__name__)

Rules = Union[RuleSet, Iterable[HolidayRule], None]


class RuleLookup(Protocol):
    """Handed to calculators so relative rules can reach other rules of the set."""
    def resolve(self, ref: str) -> Optional[date]: ...


class Calculator(Protocol):
    def __call__(self, rule: HolidayRule, year: int, lookup: RuleLookup) -> Optional[date]: ...


# ------------------------------------------------------------
# Observed-date policy
# ------------------------------------------------------------

def _shift(d: date, days: int) -> Optional[date]:
    """d + days, or None past the ends of the calendar."""
    try:
        return d + timedelta(days=days)
    except OverflowError:
        return None


def _step_off(d: Optional[date], weekends: frozenset, step: int) -> Optional[date]:
    while d is not None and weekday(d) in weekends:
        d = _shift(d, step)
    return d


def apply_observed(observed: Optional[ObservedRule], nominal: date) -> List[date]:
    """
    Calendar days on which a holiday with this nominal date is observed.

    A substitute day that would fall outside years 1..9999 is dropped.
    """
    if observed is None or weekday(nominal) not in observed.weekends:
        return [nominal]
    if observed.kind == "substitute":
        step = 1 if observed.direction == "forward" else -1
        days = [_step_off(nominal, observed.weekends, step)]
    elif observed.kind == "nearest-weekday":
        after = _step_off(nominal, observed.weekends, 1)
        before = _step_off(nominal, observed.weekends, -1)
        if after is None or before is None:
            days = [after or before]
        else:
            days = [before if (nominal - before) < (after - nominal) else after]
    else:  # bridge
        days = [nominal, _step_off(_shift(nominal, 1), observed.weekends, 1)]
    return [d for d in days if d is not None]


# ------------------------------------------------------------
# Per-year resolution
# ------------------------------------------------------------

class _YearResolver:
    """
    Nominal dates of one rule set for one year.

    Each rule is computed once; relative references go through resolve()
    with the path of rules currently being resolved, and revisiting a rule on
    that path raises CycleDetectedError.
    """

    def __init__(self, engine: "HolidayEngine", rules: RuleSet, year: int):
        self._engine = engine
        self._rules = rules
        self.year = year
        self._nominal: Dict[HolidayRule, Optional[date]] = {}

    def nominal(self, rule: HolidayRule, path: Tuple[HolidayRule, ...] = ()) -> Optional[date]:
        if rule in path:
            chain = [r.key for r in path[path.index(rule):]] + [rule.key]
            raise CycleDetectedError(chain)
        if rule in self._nominal:
            return self._nominal[rule]
        calc = self._engine.calculator_for(rule.type)
        value = calc(rule, self.year, _Lookup(self, path + (rule,)))
        if isinstance(value, datetime):
            value = value.date()
        if value is not None and not isinstance(value, date):
            raise InvalidRuleError(f"Calculator for '{rule.name}' returned {type(value).__name__}, expected date")
        self._nominal[rule] = value
        return value

    def find(self, ref: str) -> HolidayRule:
        target = self._rules.find(ref)
        if target is None:
            raise InvalidRuleError(f"Holiday rule '{ref}' referenced but not found in {self._rules!r}")
        return target


@dataclass(frozen=True)
class _Lookup:
    resolver: _YearResolver
    path: Tuple[HolidayRule, ...]

    def resolve(self, ref: str) -> Optional[date]:
        return self.resolver.nominal(self.resolver.find(ref), self.path)


class _YearTable:
    """Occurrences observed within one calendar year, sorted, with a day index."""

    def __init__(self, occurrences: List[HolidayOccurrence]):
        self.occurrences: Tuple[HolidayOccurrence, ...] = tuple(
            sorted(occurrences, key=lambda o: (o.date, o.nominal_date, o.name))
        )
        self.days: List[date] = [o.date for o in self.occurrences]
        self.by_day: Dict[date, Tuple[HolidayOccurrence, ...]] = {}
        for o in self.occurrences:
            self.by_day[o.date] = self.by_day.get(o.date, ()) + (o,)


# ------------------------------------------------------------
# Engine
# ------------------------------------------------------------

_EMPTY = RuleSet(name="empty")


def _norm(day: date) -> date:
    if isinstance(day, datetime):
        return day.date()
    return day


class HolidayEngine:
    """
    Computes holiday occurrences from rule sets.

    Per rule set the engine moves from rules-loaded to cached-for-year as
    years are queried. Tables are cached in an LRUCache keyed by
    (rule set, year) and never invalidated: rule sets are immutable.

    Every query takes an optional rule set; without one the current locale's
    holidays are used.
    """

    def __init__(
        self,
        *,
        locales: Optional[LocaleManager] = None,
        cache_size: int = 512,
        max_lookahead_years: int = 5,
    ):
        self._locales = locales
        self._calculators: Dict[RuleType, Calculator] = {}
        self._cache: LRUCache = LRUCache(cache_size)
        self.max_lookahead_years = max_lookahead_years

    # ------------------------------------------------------------
    # Calculators
    # ------------------------------------------------------------

    def register_calculator(self, kind: Union[RuleType, str], calculator: Calculator) -> None:
        if not callable(calculator):
            raise TypeError("calculator must be callable")
        self._calculators[RuleType.parse(kind)] = calculator

    def calculator_for(self, kind: RuleType) -> Calculator:
        calc = self._calculators.get(kind)
        if calc is None:
            raise CalculatorNotFoundError(kind.value, [k.value for k in self._calculators])
        return calc

    def calculators(self) -> List[str]:
        return sorted(k.value for k in self._calculators)

    # ------------------------------------------------------------
    # Rule sets
    # ------------------------------------------------------------

    def _ruleset(self, rules: Rules) -> RuleSet:
        if rules is None:
            if self._locales is None or self._locales.current is None:
                return _EMPTY
            return self._locales.current.holidays
        return RuleSet.of(rules)

    # ------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------

    def calculate(self, rule: HolidayRule, year: int, rules: Rules = None) -> Optional[date]:
        """
        Nominal date of one rule in year (before observance), or None.

        Relative rules are resolved against rules (default: current locale)
        extended by rule itself when it is not already a member.
        """
        rs = self._ruleset(rules)
        if rule not in rs.rules:
            rs = RuleSet(rs.rules + (rule,), name=rs.name)
        return _YearResolver(self, rs, year).nominal(rule)

    def _raw_year(self, rs: RuleSet, year: int) -> Tuple[HolidayOccurrence, ...]:
        """Occurrences generated by rule-year `year` (may spill into neighbours)."""
        key = ("raw", rs, year)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        out: List[HolidayOccurrence] = []
        if MIN_YEAR <= year <= MAX_YEAR:
            resolver = _YearResolver(self, rs, year)
            for rule in rs:
                if not rule.active:
                    continue
                nominal = resolver.nominal(rule)
                if nominal is None:
                    continue
                for observed_day in apply_observed(rule.observed, nominal):
                    for i in range(rule.duration):
                        day = _shift(observed_day, i)
                        if day is None:
                            break
                        out.append(HolidayOccurrence(rule, day, nominal, observed_day != nominal))
        result = tuple(out)
        self._cache.set(key, result)
        return result

    def _table(self, rs: RuleSet, year: int) -> _YearTable:
        key = ("table", rs, year)
        table = self._cache.get(key)
        if table is None:
            occ = [
                o
                for y in (year - 1, year, year + 1)
                for o in self._raw_year(rs, y)
                if o.date.year == year
            ]
            table = _YearTable(occ)
            self._cache.set(key, table)
            logger.debug("computed %d holidays for %s in %d", len(table.occurrences), rs.name or "rules", year)
        return table

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def holidays_for_year(self, year: int, rules: Rules = None) -> List[HolidayOccurrence]:
        return list(self._table(self._ruleset(rules), year).occurrences)

    def get_holidays(self, day: date, rules: Rules = None) -> List[HolidayOccurrence]:
        """All occurrences observed on day."""
        day = _norm(day)
        return list(self._table(self._ruleset(rules), day.year).by_day.get(day, ()))

    def get_holiday(self, day: date, rules: Rules = None) -> Optional[HolidayOccurrence]:
        day = _norm(day)
        found = self._table(self._ruleset(rules), day.year).by_day.get(day)
        return found[0] if found else None

    def is_holiday(self, day: date, rules: Rules = None) -> bool:
        day = _norm(day)
        return day in self._table(self._ruleset(rules), day.year).by_day

    def next_holiday(self, day: date, rules: Rules = None) -> Optional[HolidayOccurrence]:
        """First occurrence strictly after day, within max_lookahead_years."""
        day = _norm(day)
        rs = self._ruleset(rules)
        for year in range(day.year, min(day.year + self.max_lookahead_years, MAX_YEAR) + 1):
            table = self._table(rs, year)
            i = bisect_right(table.days, day)
            if i < len(table.days):
                return table.occurrences[i]
        logger.debug("no holiday within %d years after %s", self.max_lookahead_years, day)
        return None

    def previous_holiday(self, day: date, rules: Rules = None) -> Optional[HolidayOccurrence]:
        """Last occurrence strictly before day, within max_lookahead_years."""
        day = _norm(day)
        rs = self._ruleset(rules)
        for year in range(day.year, max(day.year - self.max_lookahead_years, MIN_YEAR) - 1, -1):
            table = self._table(rs, year)
            i = bisect_left(table.days, day)
            if i > 0:
                return table.occurrences[i - 1]
        logger.debug("no holiday within %d years before %s", self.max_lookahead_years, day)
        return None

    def holidays_in_range(self, start: date, end: date, rules: Rules = None) -> List[HolidayOccurrence]:
        """Occurrences with start <= date <= end, in date order."""
        start, end = _norm(start), _norm(end)
        if start > end:
            return []
        rs = self._ruleset(rules)
        out: List[HolidayOccurrence] = []
        for year in range(start.year, end.year + 1):
            out.extend(o for o in self._table(rs, year).occurrences if start <= o.date <= end)
        return out

    def cache_stats(self):
        return self._cache.get_stats()

    def clear_cache(self) -> None:
        self._cache.clear()


# ------------------------------------------------------------
# Plugin: engine plus date-value extension methods
# ------------------------------------------------------------

def _engine(self) -> HolidayEngine:
    return self.context.holiday_engine


def _day(self) -> Optional[date]:
    return self.to_date()


def _rules_for(self, rules: Any) -> Rules:
    if isinstance(rules, str):
        return self.context.locales.get_holidays(kind=rules)
    return rules


def _is_holiday(self, rules: Any = None) -> bool:
    day = _day(self)
    return day is not None and _engine(self).is_holiday(day, _rules_for(self, rules))


def _get_holiday(self, rules: Any = None) -> Optional[HolidayOccurrence]:
    day = _day(self)
    return None if day is None else _engine(self).get_holiday(day, _rules_for(self, rules))


def _get_holidays(self, rules: Any = None) -> List[HolidayOccurrence]:
    day = _day(self)
    return [] if day is None else _engine(self).get_holidays(day, _rules_for(self, rules))


def _navigate(self, rules: Any, step: Callable[..., Optional[HolidayOccurrence]]):
    day = _day(self)
    if day is None:
        return None
    occ = step(day, _rules_for(self, rules))
    return None if occ is None else self.context(occ.date)


def _next_holiday(self, rules: Any = None):
    """Date value of the next observed holiday, or None past the lookahead window."""
    return _navigate(self, rules, _engine(self).next_holiday)


def _previous_holiday(self, rules: Any = None):
    return _navigate(self, rules, _engine(self).previous_holiday)


def install_holiday_engine(kairos, utils) -> None:
    engine = HolidayEngine(
        locales=kairos.locales,
        cache_size=kairos.config.holiday_cache_size,
        max_lookahead_years=kairos.config.max_lookahead_years,
    )

    def _as_day(value: Any) -> date:
        return kairos(value).raise_if_invalid().to_date()

    def get_year_holidays(year: int, rules: Any = None) -> List[HolidayOccurrence]:
        if isinstance(rules, str):
            rules = kairos.locales.get_holidays(kind=rules)
        return engine.holidays_for_year(year, rules)

    def get_holidays_in_range(start: Any, end: Any, rules: Any = None) -> List[HolidayOccurrence]:
        if isinstance(rules, str):
            rules = kairos.locales.get_holidays(kind=rules)
        return engine.holidays_in_range(_as_day(start), _as_day(end), rules)

    kairos.add_static(
        {
            "holiday_engine": engine,
            "get_year_holidays": get_year_holidays,
            "get_holidays_in_range": get_holidays_in_range,
        }
    )


holiday_engine_plugin = Plugin(
    name="holiday-engine",
    version="1.0.0",
    install=install_holiday_engine,
    methods={
        "is_holiday": _is_holiday,
        "get_holiday": _get_holiday,
        "get_holidays": _get_holidays,
        "next_holiday": _next_holiday,
        "previous_holiday": _previous_holiday,
    },
    description="Holiday rule engine and holiday queries on date values",
)
