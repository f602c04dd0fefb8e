from __future__ import annotations
from typing import Sequence, Tuple


class KairosError(Exception):
    """Base error."""


class InvalidInputError(KairosError, ValueError):
    """Raised on request for a date value that failed validation."""

    def __init__(self, errors: Sequence[str]):
        self.errors: Tuple[str, ...] = tuple(errors)
        super().__init__("; ".join(self.errors) or "Invalid date")


class InvalidUnitError(KairosError, ValueError):
    """Raised for an unknown arithmetic unit or settable field."""


class MissingDependencyError(KairosError):
    """Raised when a plugin is installed before one of its dependencies."""

    def __init__(self, plugin: str, dependency: str):
        self.plugin = plugin
        self.dependency = dependency
        super().__init__(f"Plugin '{plugin}' requires '{dependency}' to be installed first")


class PluginInstallError(KairosError):
    """Raised when a plugin's install hook fails; registry tables are rolled back."""

    def __init__(self, plugin: str, reason: str):
        self.plugin = plugin
        super().__init__(f"Installing plugin '{plugin}' failed: {reason}")


class CycleDetectedError(KairosError):
    """Raised when a chain of relative holiday rules revisits a rule."""

    def __init__(self, chain: Sequence[str]):
        self.chain: Tuple[str, ...] = tuple(chain)
        super().__init__("Circular dependency detected in holiday rules: " + " -> ".join(self.chain))


class LocaleNotFoundError(KairosError, KeyError):
    def __init__(self, code: str, available: Sequence[str] = ()):
        self.code = code
        self.available = tuple(available)
        super().__init__(f"Unknown locale '{code}'. Available: {sorted(self.available)}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidRuleError(KairosError, ValueError):
    """Raised for malformed or unresolvable holiday rules."""


class CalculatorNotFoundError(KairosError):
    """Raised when no calculator is installed for a rule kind."""

    def __init__(self, kind: str, available: Sequence[str] = ()):
        self.kind = kind
        super().__init__(
            f"No calculator installed for rule type '{kind}'. Available: {sorted(available)}"
        )
