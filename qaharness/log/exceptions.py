"""
Custom exceptions for the logging system.
"""

from typing import Any

from qaharness.exceptions import HarnessError


class LogError(HarnessError):
    """Base exception for logging-related errors."""


class InvalidLogLevelError(LogError):
    """Raised when an invalid log level is specified."""

    def __init__(self, level: Any) -> None:
        self.level = level
        super().__init__(f"Invalid log level: {level}")
