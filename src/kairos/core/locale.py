from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import LocaleNotFoundError
from .format import english_meridiem, english_ordinal
from .types import HolidayRule, RuleSet

logger = logging.getLogger(__name__)

Rules = Union[RuleSet, Iterable[HolidayRule]]


@dataclass(frozen=True, eq=False)
class Locale:
    """
    Locale data: vocabulary for formatting and named holiday rule sets.

    holidays is the locale's main rule set. holiday_sets holds named subsets
    (e.g. "federal", "public"). regions holds rule sets that apply in one
    region only (a state, a Land, a prefecture).
    """
    code: str
    name: str
    months: Tuple[str, ...]
    weekdays: Tuple[str, ...]
    months_short: Tuple[str, ...] = ()
    weekdays_short: Tuple[str, ...] = ()
    weekdays_min: Tuple[str, ...] = ()
    formats: Mapping[str, str] = field(default_factory=dict)
    ordinal: Callable[[int], str] = english_ordinal
    meridiem: Callable[[int, int, bool], str] = english_meridiem
    holidays: Rules = ()
    holiday_sets: Mapping[str, Rules] = field(default_factory=dict)
    regions: Mapping[str, Rules] = field(default_factory=dict)

    def __post_init__(self):
        if len(self.months) != 12:
            raise ValueError(f"Locale {self.code}: expected 12 month names")
        if len(self.weekdays) != 7:
            raise ValueError(f"Locale {self.code}: expected 7 weekday names")
        object.__setattr__(self, "months", tuple(self.months))
        object.__setattr__(self, "weekdays", tuple(self.weekdays))
        object.__setattr__(self, "months_short", tuple(self.months_short) or tuple(m[:3] for m in self.months))
        object.__setattr__(self, "weekdays_short", tuple(self.weekdays_short) or tuple(w[:3] for w in self.weekdays))
        object.__setattr__(self, "weekdays_min", tuple(self.weekdays_min) or tuple(w[:2] for w in self.weekdays))
        object.__setattr__(self, "formats", dict(self.formats))
        object.__setattr__(self, "holidays", RuleSet.of(self.holidays, name=self.code))
        object.__setattr__(
            self,
            "holiday_sets",
            {k: RuleSet.of(v, name=f"{self.code}:{k}") for k, v in self.holiday_sets.items()},
        )
        object.__setattr__(
            self,
            "regions",
            {k: RuleSet.of(v, name=f"{self.code}:{k}") for k, v in self.regions.items()},
        )


class LocaleManager:
    """Registered locales plus the current selection; the first registered becomes current."""

    def __init__(self):
        self._locales: Dict[str, Locale] = {}
        self._current: Optional[str] = None
        self._combined: Dict[Tuple[str, str], RuleSet] = {}
        self._lock = RLock()

    def register(self, locale: Locale) -> None:
        with self._lock:
            self._locales[locale.code] = locale
            self._combined = {k: v for k, v in self._combined.items() if k[0] != locale.code}
            if self._current is None:
                self._current = locale.code

    def set_locale(self, code: str) -> Locale:
        with self._lock:
            if code not in self._locales:
                raise LocaleNotFoundError(code, self._locales)
            if code != self._current:
                logger.info("locale switched to %s", code)
            self._current = code
            return self._locales[code]

    @property
    def current(self) -> Optional[Locale]:
        return self._locales.get(self._current) if self._current else None

    @property
    def current_code(self) -> Optional[str]:
        return self._current

    def get(self, code: Optional[str] = None) -> Locale:
        code = code or self._current
        if code is None or code not in self._locales:
            raise LocaleNotFoundError(str(code), self._locales)
        return self._locales[code]

    def available(self) -> List[str]:
        return sorted(self._locales)

    def get_holidays(self, code: Optional[str] = None, kind: str = "all") -> RuleSet:
        """
        Rule set of a locale: "all" is the main set; any other kind names a
        holiday set or a region of that locale.
        """
        loc = self.get(code)
        if kind == "all":
            return loc.holidays
        if kind in loc.holiday_sets:
            return loc.holiday_sets[kind]
        if kind in loc.regions:
            return loc.regions[kind]
        raise KeyError(
            f"Locale {loc.code} has no holiday set '{kind}'. "
            f"Available: {sorted(['all', *loc.holiday_sets, *loc.regions])}"
        )

    def get_region_holidays(self, region: str, code: Optional[str] = None) -> RuleSet:
        """Main rules plus the region's own rules."""
        loc = self.get(code)
        if region not in loc.regions:
            raise KeyError(f"Locale {loc.code} has no region '{region}'. Available: {sorted(loc.regions)}")
        return self._merged(loc, region, (loc.holidays, loc.regions[region]))

    def get_all_holidays(self, code: Optional[str] = None) -> RuleSet:
        """Every rule the locale knows, deduplicated by rule key."""
        loc = self.get(code)
        return self._merged(loc, "*", (loc.holidays, *loc.holiday_sets.values(), *loc.regions.values()))

    def _merged(self, loc: Locale, tag: str, parts: Iterable[RuleSet]) -> RuleSet:
        with self._lock:
            cached = self._combined.get((loc.code, tag))
            if cached is not None:
                return cached
            seen = set()
            rules = []
            for part in parts:
                for r in part:
                    if r.key not in seen:
                        seen.add(r.key)
                        rules.append(r)
            merged = RuleSet(tuple(rules), name=f"{loc.code}:{tag}")
            self._combined[(loc.code, tag)] = merged
            return merged
