"""
Exception hierarchy for the harness.

Every harness error carries a human-readable message plus optional keyword
context, so callers can catch ``HarnessError`` once at the process entry
point and print something useful.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class HarnessError(Exception):
    """
    Base exception for all harness errors.

    Example:
        try:
            ctx = EnvironmentContext.from_env(lg)
        except HarnessError as e:
            lg.error(f"cannot start: {e}")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(HarnessError):
    """
    Configuration loading errors.

    Examples:
        - Config root directory not found
        - Malformed JSON/YAML
        - Config file too large
    """


class ConfigNotFoundError(ConfigError):
    """Raised when the requested environment has no configuration file."""


@dataclass(frozen=True)
class Violation:
    """A single schema violation: dotted field path and the reason it failed."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class ConfigValidationError(ConfigError):
    """
    Raised when the merged configuration fails schema validation.

    Carries every violation found, not only the first one.
    """

    def __init__(
        self, message: str, violations: list[Violation] | tuple[Violation, ...], **context: Any
    ) -> None:
        super().__init__(message, **context)
        self.violations = tuple(violations)

    @property
    def paths(self) -> list[str]:
        """Dotted paths of all offending fields."""
        return [v.path for v in self.violations]

    def __str__(self) -> str:
        lines = [super().__str__()]
        lines.extend(f"  - {v}" for v in self.violations)
        return "\n".join(lines)


class CertificateError(HarnessError):
    """
    Client certificate errors.

    Raised when the configured PFX file is missing or unreadable.
    """
