from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from ..config import KairosConfig
from .cache import LRUCache, memoize
from .date import KairosDate
from .locale import LocaleManager
from .parse import NOW, validate_input
from .plugin import PluginArg, PluginRegistry, PluginUtils

logger = logging.getLogger(__name__)


class Kairos:
    """
    Explicit library context: create -> install* -> query*.

    A context owns its plugin registry, locale manager and shared cache, so
    independent contexts (one per test, one per tenant) never see each
    other's plugins. Calling the context builds a date value:

        k = Kairos().use(holiday_engine_plugin)
        d = k("2024-07-04")

    Static members added by plugins resolve as attributes of the context
    (k.get_easter(2024), k.holiday_engine).
    """

    def __init__(self, config: Optional[KairosConfig] = None):
        self.config = config or KairosConfig()
        self.registry = PluginRegistry()
        self.locales = LocaleManager()
        self.cache: LRUCache = LRUCache(self.config.shared_cache_size)
        self.utils = PluginUtils(
            cache=self.cache,
            memoize=memoize,
            validate_input=validate_input,
            config=self.config,
        )

    def __call__(self, value: Any = NOW) -> KairosDate:
        return KairosDate(value, context=self)

    date = __call__

    def now(self) -> KairosDate:
        return KairosDate(NOW, context=self)

    def unix(self, seconds: float) -> KairosDate:
        """Date value from epoch seconds."""
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            return KairosDate(None, context=self)
        return KairosDate(seconds * 1000, context=self)

    # ------------------------------------------------------------
    # Plugin surface
    # ------------------------------------------------------------

    def use(self, plugins: PluginArg) -> "Kairos":
        self.registry.install(plugins, handle=self, utils=self.utils)
        return self

    def extend(self, methods: Mapping[str, Callable[..., Any]]) -> None:
        for name in methods:
            if hasattr(KairosDate, name):
                logger.warning("extension method %s is hidden by a built-in KairosDate member", name)
        self.registry.extend(methods)

    def add_static(self, statics: Mapping[str, Any]) -> None:
        for name in statics:
            if hasattr(type(self), name):
                logger.warning("static %s is hidden by a built-in Kairos member", name)
        self.registry.add_static(statics)

    def is_plugin_loaded(self, name: str) -> bool:
        return self.registry.is_plugin_loaded(name)

    @property
    def plugins(self) -> List[str]:
        return self.registry.installed()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name in ("registry", "config", "locales", "cache", "utils"):
            raise AttributeError(name)
        if self.registry.has_static(name):
            return self.registry.get_static(name)
        raise AttributeError(f"'Kairos' object has no attribute '{name}'")

    def __repr__(self) -> str:
        return f"Kairos(plugins={self.registry.installed()}, locale={self.locales.current_code!r})"
