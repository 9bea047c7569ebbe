"""
Configuration for the logging system.

LogConfig is immutable; build it from parameters or from the process
environment (``LOG_LEVEL`` / ``LOG_FILE``).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .constants import LogConstants
from .exceptions import InvalidLogLevelError


def resolve_level(level: str | int | bool) -> int | bool:
    """
    Resolve log level from string, numeric value, or boolean.

    Args:
        level: Level name ("info", "debug", ...), number, or False to disable

    Returns:
        Numeric log level, or False when logging is disabled

    Raises:
        InvalidLogLevelError: If the level name is not recognized
    """
    if isinstance(level, bool):
        return logging.INFO if level else False
    if isinstance(level, int):
        return level
    name = level.strip().lower()
    if name.isnumeric():
        return int(name)
    if name in LogConstants.LEVEL_NAMES:
        return LogConstants.LEVEL_NAMES[name]
    raise InvalidLogLevelError(level)


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable logger configuration.

    Attributes:
        level: Numeric level, or False to disable logging
        location: Show ``[file:line]`` of the caller
        micros: Add microseconds to timestamps
        colors: Use ANSI colors on the console
        file: Optional path of a rotating log file (always written without colors)
    """

    level: int | bool = logging.INFO
    location: bool = False
    micros: bool = False
    colors: bool = True
    file: str | None = None

    @classmethod
    def from_params(
        cls,
        level: str | int | bool = "info",
        location: bool = False,
        micros: bool = False,
        colors: bool = True,
        file: str | None = None,
    ) -> LogConfig:
        """Create LogConfig from individual parameters, resolving the level name."""
        return cls(
            level=resolve_level(level),
            location=location,
            micros=micros,
            colors=colors,
            file=file,
        )

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, default_level: str = "info"
    ) -> LogConfig:
        """
        Create LogConfig from ``LOG_LEVEL`` and ``LOG_FILE``.

        Colors are disabled when ``NO_COLOR`` is set.
        """
        env = os.environ if environ is None else environ
        level = env.get(LogConstants.ENV_LEVEL) or default_level
        file = env.get(LogConstants.ENV_FILE) or None
        return cls.from_params(level=level, colors="NO_COLOR" not in env, file=file)
