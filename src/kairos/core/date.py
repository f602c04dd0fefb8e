from __future__ import annotations

from datetime import date, datetime, timezone
from functools import total_ordering
from types import MethodType
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from .errors import InvalidInputError, InvalidUnitError
from .format import format_datetime
from .parse import NOW, parse_or_invalid
from .time import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    add_months,
    days_in_month,
    ms_to_datetime,
    wall_to_ms,
    weekday,
)

if TYPE_CHECKING:
    from .context import Kairos


UNIT_ALIASES: Dict[str, str] = {}
for _unit, _aliases in {
    "year": ("y", "year", "years"),
    "month": ("M", "month", "months"),
    "week": ("w", "week", "weeks"),
    "day": ("d", "day", "days"),
    "hour": ("h", "hour", "hours"),
    "minute": ("m", "minute", "minutes"),
    "second": ("s", "second", "seconds"),
    "millisecond": ("ms", "millisecond", "milliseconds"),
}.items():
    for _alias in _aliases:
        UNIT_ALIASES[_alias] = _unit

_FIXED_MS = {
    "hour": MS_PER_HOUR,
    "minute": MS_PER_MINUTE,
    "second": MS_PER_SECOND,
    "millisecond": 1,
}

SETTABLE = ("year", "month", "date", "hour", "minute", "second", "millisecond")


def normalize_unit(unit: str) -> str:
    try:
        return UNIT_ALIASES[unit]
    except KeyError:
        raise InvalidUnitError(
            f"Unknown unit '{unit}'. Available: {sorted(set(UNIT_ALIASES.values()))}"
        ) from None


@total_ordering
class KairosDate:
    """
    Immutable wrapper over an absolute instant (epoch milliseconds).

    Construction never raises. Unusable input gives an instance whose
    is_valid() is False and whose errors explain why; its getters return None.
    Calendar fields are read in the owning context's time zone.

    Methods installed by plugins are looked up on the context's registry at
    attribute access time, so dates created before an install see them too.
    """

    __slots__ = ("_ctx", "_ms", "_errors", "_dt")

    def __init__(self, value: Any = NOW, *, context: "Kairos"):
        if isinstance(value, KairosDate):
            ms, errors = value._ms, value._errors
        else:
            ms, errors = parse_or_invalid(value, context.config.tz)
        dt = None
        if ms is not None:
            try:
                dt = ms_to_datetime(ms, context.config.tz)
            except (OverflowError, ValueError):
                ms, errors = None, (f"Timestamp out of range: {ms}",)
        object.__setattr__(self, "_ctx", context)
        object.__setattr__(self, "_ms", ms)
        object.__setattr__(self, "_errors", tuple(errors))
        object.__setattr__(self, "_dt", dt)

    @classmethod
    def _invalid(cls, context: "Kairos", *errors: str) -> "KairosDate":
        inst = cls.__new__(cls)
        for name, value in (("_ctx", context), ("_ms", None), ("_errors", errors), ("_dt", None)):
            object.__setattr__(inst, name, value)
        return inst

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("KairosDate is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("KairosDate is immutable")

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: plugin-provided methods.
        if name.startswith("_"):
            raise AttributeError(name)
        fn = self._ctx.registry.get_method(name)
        if fn is None:
            raise AttributeError(f"'KairosDate' object has no attribute '{name}'")
        return MethodType(fn, self)

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self._ctx.registry.method_names()))

    # ------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------

    def is_valid(self) -> bool:
        return self._ms is not None

    @property
    def errors(self) -> Tuple[str, ...]:
        return self._errors

    def raise_if_invalid(self) -> "KairosDate":
        if self._ms is None:
            raise InvalidInputError(self._errors)
        return self

    @property
    def context(self) -> "Kairos":
        return self._ctx

    # ------------------------------------------------------------
    # Getters
    # ------------------------------------------------------------

    @property
    def year(self) -> Optional[int]:
        return self._dt.year if self._dt else None

    @property
    def month(self) -> Optional[int]:
        """Month, 1-based."""
        return self._dt.month if self._dt else None

    @property
    def date(self) -> Optional[int]:
        """Day of the month."""
        return self._dt.day if self._dt else None

    @property
    def day(self) -> Optional[int]:
        """Day of the week, 0 = Sunday."""
        return weekday(self._dt.date()) if self._dt else None

    @property
    def hour(self) -> Optional[int]:
        return self._dt.hour if self._dt else None

    @property
    def minute(self) -> Optional[int]:
        return self._dt.minute if self._dt else None

    @property
    def second(self) -> Optional[int]:
        return self._dt.second if self._dt else None

    @property
    def millisecond(self) -> Optional[int]:
        return self._dt.microsecond // 1000 if self._dt else None

    # ------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------

    def _fields(self) -> Dict[str, int]:
        dt = self._dt
        return {
            "year": dt.year,
            "month": dt.month,
            "date": dt.day,
            "hour": dt.hour,
            "minute": dt.minute,
            "second": dt.second,
            "millisecond": dt.microsecond // 1000,
        }

    def _from_fields(self, fields: Dict[str, int]) -> "KairosDate":
        try:
            ms = wall_to_ms(
                self._ctx.config.tz,
                fields["year"],
                fields["month"],
                fields["date"],
                fields["hour"],
                fields["minute"],
                fields["second"],
                fields["millisecond"],
            )
        except (OverflowError, ValueError) as exc:
            return KairosDate._invalid(self._ctx, f"Date out of range: {exc}")
        return KairosDate(ms, context=self._ctx)

    def set(self, **fields: int) -> "KairosDate":
        """
        Copy with the given calendar fields replaced.

        Fields: year, month (1-based), date (day of month), hour, minute,
        second, millisecond. Out-of-range values roll over into the next unit:
        set(month=13) is January of the following year, set(date=0) the last
        day of the previous month.
        """
        unknown = sorted(set(fields) - set(SETTABLE))
        if unknown:
            raise InvalidUnitError(f"Cannot set {unknown}. Settable fields: {list(SETTABLE)}")
        if not self.is_valid():
            return self.clone()
        current = self._fields()
        current.update(fields)
        return self._from_fields(current)

    def add(self, amount: float, unit: str = "day") -> "KairosDate":
        """
        Shift by amount units. Month and year shifts keep the day of month
        when possible and otherwise clamp it to the last day of the target
        month. Day and week shifts follow the wall clock; fractional days
        carry over as milliseconds.
        """
        u = normalize_unit(unit)
        if not self.is_valid():
            return self.clone()
        if u in _FIXED_MS:
            return KairosDate(self._ms + round(amount * _FIXED_MS[u]), context=self._ctx)
        if u in ("year", "month"):
            if amount != int(amount):
                raise ValueError(f"{u} arithmetic needs a whole number, got {amount!r}")
            months = int(amount) * (12 if u == "year" else 1)
            fields = self._fields()
            y, m = add_months(fields["year"], fields["month"], months)
            fields.update(year=y, month=m, date=min(fields["date"], days_in_month(y, m)))
            return self._from_fields(fields)
        days = amount * (7 if u == "week" else 1)
        whole = int(days)
        fields = self._fields()
        fields["date"] += whole
        shifted = self._from_fields(fields)
        rest = round((days - whole) * MS_PER_DAY)
        if rest and shifted.is_valid():
            return KairosDate(shifted._ms + rest, context=self._ctx)
        return shifted

    def subtract(self, amount: float, unit: str = "day") -> "KairosDate":
        return self.add(-amount, unit)

    def start_of(self, unit: str) -> "KairosDate":
        u = normalize_unit(unit)
        if u == "millisecond":
            return self.clone()
        if not self.is_valid():
            return self.clone()
        f = self._fields()
        if u == "week":
            f["date"] -= self.day
        order = ("year", "month", "day", "hour", "minute", "second")
        floor = {"week": "day"}.get(u, u)
        defaults = {"month": 1, "date": 1, "hour": 0, "minute": 0, "second": 0, "millisecond": 0}
        names = {"day": "date"}
        for later in order[order.index(floor) + 1:]:
            key = names.get(later, later)
            f[key] = defaults[key]
        f["millisecond"] = 0
        return self._from_fields(f)

    def end_of(self, unit: str) -> "KairosDate":
        u = normalize_unit(unit)
        if u == "millisecond" or not self.is_valid():
            return self.clone()
        nxt = self.start_of(u).add(1, u)
        if not nxt.is_valid():
            return nxt
        return KairosDate(nxt._ms - 1, context=self._ctx)

    def clone(self) -> "KairosDate":
        return KairosDate(self, context=self._ctx)

    # ------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------

    def _coerce(self, other: Any) -> "KairosDate":
        if isinstance(other, KairosDate):
            return other
        return KairosDate(other, context=self._ctx)

    def is_before(self, other: Any) -> bool:
        o = self._coerce(other)
        return self.is_valid() and o.is_valid() and self._ms < o._ms

    def is_after(self, other: Any) -> bool:
        o = self._coerce(other)
        return self.is_valid() and o.is_valid() and self._ms > o._ms

    def is_same(self, other: Any) -> bool:
        o = self._coerce(other)
        return self.is_valid() and o.is_valid() and self._ms == o._ms

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KairosDate):
            return NotImplemented
        return self._ms is not None and self._ms == other._ms

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, KairosDate) or self._ms is None or other._ms is None:
            return NotImplemented
        return self._ms < other._ms

    def __hash__(self) -> int:
        return hash(("KairosDate", self._ms))

    # ------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------

    def value_of(self) -> Optional[int]:
        """Epoch milliseconds, or None when invalid."""
        return self._ms

    def unix(self) -> Optional[int]:
        """Epoch seconds, or None when invalid."""
        return self._ms // 1000 if self._ms is not None else None

    def to_datetime(self) -> Optional[datetime]:
        return self._dt

    def to_date(self) -> Optional[date]:
        return self._dt.date() if self._dt else None

    def to_iso(self) -> Optional[str]:
        if self._dt is None:
            return None
        utc = self._dt.astimezone(timezone.utc)
        return utc.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"

    def format(self, template: str = "YYYY-MM-DD") -> str:
        if self._dt is None:
            return "Invalid Date"
        return format_datetime(self._dt, template, self._ctx.locales.current)

    def __str__(self) -> str:
        return self.to_iso() or "Invalid Date"

    def __repr__(self) -> str:
        if self._dt is None:
            return f"KairosDate(<invalid: {'; '.join(self._errors)}>)"
        return f"KairosDate('{self.to_iso()}')"
