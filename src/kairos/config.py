from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import timezone, tzinfo
from typing import FrozenSet
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class KairosConfig:
    """
    Settings held by a Kairos context.

    tz:                  zone for component getters/setters and date-only strings
    default_locale:      locale selected by build_default_context()
    holiday_cache_size:  per-year holiday tables kept by the engine
    shared_cache_size:   capacity of the cache handed to plugins
    max_lookahead_years: years scanned by next/previous holiday navigation
    weekends:            non-working weekdays (0 = Sunday) for business-day math
    """
    tz: tzinfo = timezone.utc
    default_locale: str = "en-US"
    holiday_cache_size: int = 512
    shared_cache_size: int = 1000
    max_lookahead_years: int = 5
    weekends: FrozenSet[int] = field(default_factory=lambda: frozenset({0, 6}))

    def __post_init__(self):
        if not isinstance(self.tz, tzinfo):
            raise ValueError(f"tz must be a tzinfo, got {type(self.tz).__name__}")
        if self.holiday_cache_size < 1:
            raise ValueError("holiday_cache_size must be >= 1")
        if self.shared_cache_size < 1:
            raise ValueError("shared_cache_size must be >= 1")
        if self.max_lookahead_years < 1:
            raise ValueError("max_lookahead_years must be >= 1")
        weekends = frozenset(self.weekends)
        if not all(isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6 for d in weekends):
            raise ValueError(f"weekends must be weekday numbers 0..6, got {sorted(weekends, key=repr)}")
        if len(weekends) == 7:
            raise ValueError("weekends cannot cover the whole week")
        object.__setattr__(self, "weekends", weekends)

    @staticmethod
    def from_tz_name(name: str, **kwargs) -> "KairosConfig":
        return KairosConfig(tz=ZoneInfo(name), **kwargs)

    def tweak(self, **kwargs) -> "KairosConfig":
        return replace(self, **kwargs)
