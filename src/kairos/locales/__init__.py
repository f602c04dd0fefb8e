"""Locale data plugins."""
from __future__ import annotations

from typing import Optional

from ..core.locale import Locale
from ..core.plugin import Plugin


def locale_plugin(locale: Locale, *, version: str = "1.0.0") -> Plugin:
    """
    Plugin registering locale with the context's locale manager.

    Also adds the statics locale(code=None), which switches the current
    locale when given a code and returns the current code, and
    get_available_locales().
    """

    def install(kairos, utils) -> None:
        kairos.locales.register(locale)

        def select_locale(code: Optional[str] = None) -> Optional[str]:
            if code is not None:
                kairos.locales.set_locale(code)
            return kairos.locales.current_code

        kairos.add_static(
            {
                "locale": select_locale,
                "get_available_locales": kairos.locales.available,
            }
        )

    return Plugin(
        name=f"locale-{locale.code}",
        version=version,
        dependencies=("holiday-engine",),
        install=install,
        description=f"{locale.name} ({locale.code}) names and holidays",
    )


from .de_de import DE_DE  # noqa: E402
from .en_us import EN_US  # noqa: E402
from .ja_jp import JA_JP  # noqa: E402
from .zh_cn import ZH_CN  # noqa: E402

en_us_plugin = locale_plugin(EN_US)
de_de_plugin = locale_plugin(DE_DE)
ja_jp_plugin = locale_plugin(JA_JP)
zh_cn_plugin = locale_plugin(ZH_CN)

LOCALE_PLUGINS = (en_us_plugin, de_de_plugin, ja_jp_plugin, zh_cn_plugin)

__all__ = [
    "locale_plugin",
    "LOCALE_PLUGINS",
    "EN_US",
    "DE_DE",
    "JA_JP",
    "ZH_CN",
    "en_us_plugin",
    "de_de_plugin",
    "ja_jp_plugin",
    "zh_cn_plugin",
]
