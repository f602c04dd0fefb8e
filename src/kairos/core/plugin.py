from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .cache import LRUCache
from .errors import KairosError, MissingDependencyError, PluginInstallError

logger = logging.getLogger(__name__)

InstallHook = Callable[[Any, "PluginUtils"], None]


@dataclass(frozen=True)
class PluginUtils:
    """Helper bag handed to every install hook."""
    cache: LRUCache
    memoize: Callable[..., Any]
    validate_input: Callable[[Any, str], bool]
    config: Any = None


@dataclass(frozen=True, eq=False)
class Plugin:
    """
    Named, versioned capability set.

    methods are attached to every date value, static_methods to the context.
    Both tables are merged before install runs, so the hook may rely on them
    and may shadow them through handle.extend / handle.add_static.
    """
    name: str
    install: Optional[InstallHook] = None
    version: str = "0.0.0"
    dependencies: Tuple[str, ...] = ()
    methods: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    static_methods: Mapping[str, Any] = field(default_factory=dict)
    description: str = ""

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Plugin name must be a non-empty string")
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "methods", dict(self.methods))
        object.__setattr__(self, "static_methods", dict(self.static_methods))


PluginArg = Union[Plugin, Sequence[Plugin]]


class PluginRegistry:
    """
    Owns the installed-plugin set and the method tables derived from it.

    A plugin name installs at most once: later installs of the same name are
    skipped even when the descriptor differs. Dependencies must already be
    installed. Same-named methods follow last-writer-wins.
    """

    def __init__(self):
        self._installed: Dict[str, Plugin] = {}
        self._methods: Dict[str, Callable[..., Any]] = {}
        self._statics: Dict[str, Any] = {}
        self._lock = RLock()

    # ------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------

    def install(
        self,
        plugins: PluginArg,
        *,
        handle: Any = None,
        utils: Optional[PluginUtils] = None,
    ) -> List[str]:
        """Install one plugin or a list in order; returns the names actually installed."""
        if isinstance(plugins, Plugin):
            plugins = [plugins]
        installed = []
        for plugin in plugins:
            if self._install_one(plugin, self if handle is None else handle, utils):
                installed.append(plugin.name)
        return installed

    def _install_one(self, plugin: Plugin, handle: Any, utils: Optional[PluginUtils]) -> bool:
        if not isinstance(plugin, Plugin):
            raise TypeError(f"Expected Plugin, got {type(plugin).__name__}")
        with self._lock:
            if plugin.name in self._installed:
                logger.debug("plugin %s already installed, skipping", plugin.name)
                return False
            for dep in plugin.dependencies:
                if dep not in self._installed:
                    raise MissingDependencyError(plugin.name, dep)

            snapshot = (dict(self._installed), dict(self._methods), dict(self._statics))
            try:
                self.extend(plugin.methods)
                self.add_static(plugin.static_methods)
                if plugin.install is not None:
                    plugin.install(handle, utils)
            except KairosError:
                self._installed, self._methods, self._statics = snapshot
                raise
            except Exception as exc:
                self._installed, self._methods, self._statics = snapshot
                raise PluginInstallError(plugin.name, f"{type(exc).__name__}: {exc}") from exc

            self._installed[plugin.name] = plugin
            logger.debug("installed plugin %s %s", plugin.name, plugin.version)
            return True

    # ------------------------------------------------------------
    # Method tables
    # ------------------------------------------------------------

    @staticmethod
    def _check_table(table: Mapping[str, Any], *, callables: bool) -> None:
        for name, value in table.items():
            if not isinstance(name, str) or not name or name.startswith("_"):
                raise ValueError(f"Invalid extension name {name!r}")
            if callables and not callable(value):
                raise TypeError(f"Extension method '{name}' is not callable")

    def extend(self, methods: Mapping[str, Callable[..., Any]]) -> None:
        self._check_table(methods, callables=True)
        with self._lock:
            for name, fn in methods.items():
                if name in self._methods and self._methods[name] is not fn:
                    logger.debug("method %s shadowed by a later extension", name)
                self._methods[name] = fn

    def add_static(self, statics: Mapping[str, Any]) -> None:
        self._check_table(statics, callables=False)
        with self._lock:
            for name, value in statics.items():
                if name in self._statics and self._statics[name] is not value:
                    logger.debug("static %s shadowed by a later extension", name)
                self._statics[name] = value

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def is_plugin_loaded(self, name: str) -> bool:
        return name in self._installed

    def installed(self) -> List[str]:
        """Installed plugin names in install order."""
        return list(self._installed)

    def get_plugin(self, name: str) -> Plugin:
        if name not in self._installed:
            raise KeyError(f"Unknown plugin '{name}'. Available: {sorted(self._installed)}")
        return self._installed[name]

    def plugins(self) -> Iterable[Plugin]:
        return tuple(self._installed.values())

    def get_method(self, name: str) -> Optional[Callable[..., Any]]:
        return self._methods.get(name)

    def get_static(self, name: str, default: Any = None) -> Any:
        return self._statics.get(name, default)

    def has_static(self, name: str) -> bool:
        return name in self._statics

    def method_names(self) -> List[str]:
        return sorted(self._methods)

    def static_names(self) -> List[str]:
        return sorted(self._statics)
