from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, ClassVar, FrozenSet, Iterable, Iterator, Literal, Optional, Tuple, Union

from .errors import InvalidRuleError


class RuleType(str, Enum):
    FIXED = "fixed"
    NTH_WEEKDAY = "nth-weekday"
    EASTER_BASED = "easter-based"
    LUNAR_BASED = "lunar-based"
    RELATIVE = "relative"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: Union[str, "RuleType"]) -> "RuleType":
        if isinstance(value, RuleType):
            return value
        name = _RULE_TYPE_ALIASES.get(value, value)
        try:
            return cls(name)
        except ValueError:
            raise InvalidRuleError(
                f"Unknown rule type '{value}'. Available: {[t.value for t in cls]}"
            ) from None


_RULE_TYPE_ALIASES = {"easter": "easter-based", "lunar": "lunar-based", "nth": "nth-weekday"}


def _require_int(owner: str, name: str, value: Any, lo: Optional[int] = None, hi: Optional[int] = None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRuleError(f"{owner}: {name} must be an integer, got {value!r}")
    if (lo is not None and value < lo) or (hi is not None and value > hi):
        raise InvalidRuleError(f"{owner}: {name} {value} out of range {lo}..{hi}")


# ------------------------------------------------------------
# Rule payloads (one per rule kind)
# ------------------------------------------------------------

@dataclass(frozen=True)
class FixedRule:
    kind: ClassVar[RuleType] = RuleType.FIXED
    month: int
    day: int

    def __post_init__(self):
        _require_int("fixed rule", "month", self.month, 1, 12)
        _require_int("fixed rule", "day", self.day, 1, 31)


@dataclass(frozen=True)
class NthWeekdayRule:
    """nth occurrence of weekday (0 = Sunday) in month; negative nth counts from the end."""
    kind: ClassVar[RuleType] = RuleType.NTH_WEEKDAY
    month: int
    weekday: int
    nth: int

    def __post_init__(self):
        _require_int("nth-weekday rule", "month", self.month, 1, 12)
        _require_int("nth-weekday rule", "weekday", self.weekday, 0, 6)
        _require_int("nth-weekday rule", "nth", self.nth, -5, 5)
        if self.nth == 0:
            raise InvalidRuleError("nth-weekday rule: nth must be 1..5 or -1..-5, got 0")


@dataclass(frozen=True)
class EasterRule:
    """Days from Easter Sunday (Western, or Orthodox when orthodox=True)."""
    kind: ClassVar[RuleType] = RuleType.EASTER_BASED
    offset: int = 0
    orthodox: bool = False

    def __post_init__(self):
        _require_int("easter rule", "offset", self.offset)


@dataclass(frozen=True)
class LunarRule:
    """Lunar month/day in the named lunar calendar, shifted by offset days."""
    kind: ClassVar[RuleType] = RuleType.LUNAR_BASED
    month: int
    day: int
    leap: bool = False
    offset: int = 0
    calendar: str = "chinese"

    def __post_init__(self):
        _require_int("lunar rule", "month", self.month, 1, 12)
        _require_int("lunar rule", "day", self.day, 1, 30)
        _require_int("lunar rule", "offset", self.offset)
        if not self.calendar:
            raise InvalidRuleError("lunar rule: calendar must be named")


@dataclass(frozen=True)
class RelativeRule:
    """offset days from another rule (by id or name) of the same rule set."""
    kind: ClassVar[RuleType] = RuleType.RELATIVE
    relative_to: str
    offset: int = 0

    def __post_init__(self):
        if not isinstance(self.relative_to, str) or not self.relative_to:
            raise InvalidRuleError("relative rule: relative_to must be a non-empty string")
        _require_int("relative rule", "offset", self.offset)


@dataclass(frozen=True)
class CustomRule:
    """calculate(year) returns the holiday's date for that year, or None."""
    kind: ClassVar[RuleType] = RuleType.CUSTOM
    calculate: Callable[[int], Any]

    def __post_init__(self):
        if not callable(self.calculate):
            raise InvalidRuleError("custom rule: calculate must be callable")


RulePayload = Union[FixedRule, NthWeekdayRule, EasterRule, LunarRule, RelativeRule, CustomRule]
PAYLOAD_TYPES = (FixedRule, NthWeekdayRule, EasterRule, LunarRule, RelativeRule, CustomRule)


# ------------------------------------------------------------
# Observed-date policy
# ------------------------------------------------------------

ObservedKind = Literal["substitute", "nearest-weekday", "bridge"]


@dataclass(frozen=True)
class ObservedRule:
    """
    What happens when the nominal date falls on one of weekends (0 = Sunday).

    substitute:       move day by day in direction until off the weekend
    nearest-weekday:  move to the closest non-weekend day (forward on ties)
    bridge:           keep the nominal day and add the next non-weekend day
    """
    kind: ObservedKind = "substitute"
    weekends: FrozenSet[int] = frozenset({0, 6})
    direction: Literal["forward", "backward"] = "forward"

    def __post_init__(self):
        if self.kind not in ("substitute", "nearest-weekday", "bridge"):
            raise InvalidRuleError(f"observed rule: unknown kind '{self.kind}'")
        if self.direction not in ("forward", "backward"):
            raise InvalidRuleError(f"observed rule: unknown direction '{self.direction}'")
        weekends = frozenset(self.weekends)
        for d in weekends:
            _require_int("observed rule", "weekend day", d, 0, 6)
        if len(weekends) == 7:
            raise InvalidRuleError("observed rule: weekends cannot cover the whole week")
        object.__setattr__(self, "weekends", weekends)


# ------------------------------------------------------------
# Holiday rule and computed occurrence
# ------------------------------------------------------------

@dataclass(frozen=True)
class HolidayRule:
    name: str
    rule: RulePayload
    id: Optional[str] = None
    observed: Optional[ObservedRule] = None
    regions: Tuple[str, ...] = ()
    active: bool = True
    duration: int = 1

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidRuleError("holiday rule: name must be a non-empty string")
        if not isinstance(self.rule, PAYLOAD_TYPES):
            raise InvalidRuleError(
                f"holiday rule '{self.name}': unsupported payload {type(self.rule).__name__}"
            )
        _require_int(f"holiday rule '{self.name}'", "duration", self.duration, 1, 366)
        object.__setattr__(self, "regions", tuple(self.regions))

    @property
    def type(self) -> RuleType:
        return self.rule.kind

    @property
    def key(self) -> str:
        """Stable key used by relative references and cycle reports."""
        return self.id or self.name


@dataclass(frozen=True)
class HolidayOccurrence:
    """
    A rule landing on a calendar day.

    nominal_date is the date the rule computes before observance; observed
    is set when an observed-date policy moved the holiday to this day.
    """
    rule: HolidayRule
    date: date
    nominal_date: date
    observed: bool = False

    @property
    def name(self) -> str:
        return self.rule.name

    @property
    def id(self) -> str:
        return self.rule.key

    @property
    def type(self) -> RuleType:
        return self.rule.type


@dataclass(frozen=True, eq=False)
class RuleSet:
    """
    Immutable, identity-hashed collection of holiday rules.

    The holiday engine keys its per-year cache on the RuleSet object, so
    reuse one instance to share cached tables.
    """
    rules: Tuple[HolidayRule, ...] = ()
    name: str = ""

    def __post_init__(self):
        rules = tuple(self.rules)
        for r in rules:
            if not isinstance(r, HolidayRule):
                raise InvalidRuleError(f"RuleSet accepts HolidayRule items, got {type(r).__name__}")
        object.__setattr__(self, "rules", rules)

    def __iter__(self) -> Iterator[HolidayRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"RuleSet(name={self.name!r}, rules={len(self.rules)})"

    def find(self, ref: str) -> Optional[HolidayRule]:
        """Look up by id, then by name, then by case-insensitive name."""
        for r in self.rules:
            if r.id == ref:
                return r
        for r in self.rules:
            if r.name == ref:
                return r
        low = ref.lower()
        for r in self.rules:
            if r.name.lower() == low:
                return r
        return None

    @staticmethod
    def of(rules: Union["RuleSet", Iterable[HolidayRule]], name: str = "") -> "RuleSet":
        if isinstance(rules, RuleSet):
            return rules
        return RuleSet(tuple(rules), name=name)
