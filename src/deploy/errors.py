"""Exceptions raised by the deployment configuration registry and validator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.deploy.validation import Violation


class DeployConfigError(Exception):
    """Base class for every deployment configuration error."""


class UnknownEnvironmentError(DeployConfigError, KeyError):
    """The requested environment has no registered configuration."""

    def __init__(self, environment: str, known: tuple[str, ...] = ()) -> None:
        self.environment = environment
        self.known = known
        super().__init__(environment)

    def __str__(self) -> str:
        known = ", ".join(self.known) or "none"
        return f"Unknown environment {self.environment!r} (registered: {known})"


class MalformedConfigError(DeployConfigError, ValueError):
    """A configuration value is structurally unusable (e.g. an unparsable decimal)."""

    def __init__(self, field_path: str, reason: str) -> None:
        self.field_path = field_path
        self.reason = reason
        super().__init__(f"{field_path}: {reason}")


class ConfigValidationError(DeployConfigError):
    """One or more invariants failed; carries every violation found."""

    def __init__(self, environment: str | None, violations: tuple[Violation, ...]) -> None:
        self.environment = environment
        self.violations = violations
        lines = [f"  {v.field_path}: {v.message}" for v in violations]
        where = f" for {environment!r}" if environment else ""
        super().__init__(
            f"{len(violations)} violation(s){where}:\n" + "\n".join(lines)
        )


class UnresolvedAddressError(DeployConfigError):
    """A placeholder was still unresolved when a concrete value was required."""

    def __init__(self, field_path: str) -> None:
        self.field_path = field_path
        super().__init__(f"{field_path} must be resolved before use")
