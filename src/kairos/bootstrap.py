from __future__ import annotations

from typing import Optional, Tuple

from .business import business_plugin
from .config import KairosConfig
from .core.context import Kairos
from .core.plugin import Plugin
from .holiday import HOLIDAY_PLUGINS
from .locales import LOCALE_PLUGINS


def default_plugins() -> Tuple[Plugin, ...]:
    return (*HOLIDAY_PLUGINS, business_plugin, *LOCALE_PLUGINS)


def build_default_context(config: Optional[KairosConfig] = None) -> Kairos:
    """Context with every shipped plugin installed and config.default_locale selected."""
    ctx = Kairos(config).use(list(default_plugins()))
    ctx.locales.set_locale(ctx.config.default_locale)
    return ctx
