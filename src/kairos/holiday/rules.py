"""
Builders for holiday rules.

Locale tables use the short builders (fixed, nth_weekday, easter, ...);
rule_from_dict accepts plain mappings such as parsed JSON:

    {"name": "Labor Day", "type": "nth-weekday",
     "rule": {"month": 9, "weekday": 1, "nth": 1}}
"""
from __future__ import annotations
from typing import Any, Callable, Iterable, List, Mapping, Optional

from ..core.errors import InvalidRuleError
from ..core.types import (
    CustomRule,
    EasterRule,
    FixedRule,
    HolidayRule,
    LunarRule,
    NthWeekdayRule,
    ObservedRule,
    RelativeRule,
    RuleSet,
    RuleType,
)

MONDAY_IF_WEEKEND = ObservedRule("substitute")
SUNDAY_TO_MONDAY = ObservedRule("substitute", weekends=frozenset({0}))
NEAREST_WEEKDAY = ObservedRule("nearest-weekday")


def fixed(name: str, month: int, day: int, **kw: Any) -> HolidayRule:
    return HolidayRule(name, FixedRule(month, day), **kw)

def nth_weekday(name: str, month: int, weekday: int, nth: int, **kw: Any) -> HolidayRule:
    return HolidayRule(name, NthWeekdayRule(month, weekday, nth), **kw)

def easter(name: str, offset: int = 0, *, orthodox: bool = False, **kw: Any) -> HolidayRule:
    return HolidayRule(name, EasterRule(offset, orthodox), **kw)

def lunar(name: str, month: int, day: int, *, leap: bool = False, offset: int = 0,
          calendar: str = "chinese", **kw: Any) -> HolidayRule:
    return HolidayRule(name, LunarRule(month, day, leap, offset, calendar), **kw)

def relative(name: str, relative_to: str, offset: int, **kw: Any) -> HolidayRule:
    return HolidayRule(name, RelativeRule(relative_to, offset), **kw)

def custom(name: str, calculate: Callable[[int], Any], **kw: Any) -> HolidayRule:
    return HolidayRule(name, CustomRule(calculate), **kw)


# ------------------------------------------------------------
# Mapping input
# ------------------------------------------------------------

_PAYLOAD_FIELDS = {
    RuleType.FIXED: (FixedRule, ("month", "day")),
    RuleType.NTH_WEEKDAY: (NthWeekdayRule, ("month", "weekday", "nth")),
    RuleType.EASTER_BASED: (EasterRule, ("offset", "orthodox")),
    RuleType.LUNAR_BASED: (LunarRule, ("month", "day", "leap", "offset", "calendar")),
    RuleType.RELATIVE: (RelativeRule, ("relative_to", "offset")),
    RuleType.CUSTOM: (CustomRule, ("calculate",)),
}
_CAMEL = {"relativeTo": "relative_to"}


def validate_rule_dict(data: Mapping[str, Any]) -> List[str]:
    """Problems with a rule mapping, as messages; empty when it would build."""
    try:
        rule_from_dict(data)
    except InvalidRuleError as exc:
        return [str(exc)]
    return []


def _observed_from(data: Optional[Mapping[str, Any]]) -> Optional[ObservedRule]:
    if data is None:
        return None
    return ObservedRule(
        kind=data.get("type", data.get("kind", "substitute")),
        weekends=frozenset(data.get("weekends", (0, 6))),
        direction=data.get("direction", "forward"),
    )


def rule_from_dict(data: Mapping[str, Any]) -> HolidayRule:
    if not isinstance(data, Mapping):
        raise InvalidRuleError(f"holiday rule must be a mapping, got {type(data).__name__}")
    if "name" not in data or "type" not in data:
        raise InvalidRuleError("holiday rule needs 'name' and 'type'")
    kind = RuleType.parse(data["type"])
    payload_cls, fields = _PAYLOAD_FIELDS[kind]
    raw = {_CAMEL.get(k, k): v for k, v in dict(data.get("rule") or {}).items()}
    unknown = sorted(set(raw) - set(fields))
    if unknown:
        raise InvalidRuleError(f"holiday rule '{data['name']}': unknown {kind.value} field(s) {unknown}")
    try:
        payload = payload_cls(**raw)
    except TypeError as exc:
        raise InvalidRuleError(f"holiday rule '{data['name']}': {exc}") from None
    return HolidayRule(
        name=data["name"],
        rule=payload,
        id=data.get("id"),
        observed=_observed_from(data.get("observed") or data.get("observedRule")),
        regions=tuple(data.get("regions") or ()),
        active=bool(data.get("active", True)),
        duration=data.get("duration", 1),
    )


def ruleset_from_dicts(items: Iterable[Mapping[str, Any]], name: str = "") -> RuleSet:
    return RuleSet(tuple(rule_from_dict(d) for d in items), name=name)
