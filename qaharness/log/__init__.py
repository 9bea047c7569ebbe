"""
Logging for the harness.

Extends Python's standard logging with:
- Structured extra fields rendered as ``[key:value]``
- Colored console output with ANSI escape sequences
- Optional rotating file output (``LOG_FILE``)
- Secret masking on every handler
- Derived component loggers sharing the root's handlers

Log level control: debug, info, warning, error, critical, or "false" to
disable logging entirely.
"""

from .config import LogConfig, resolve_level
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory, create_lg, create_root_lg, derive_lg, null_lg
from .formatters import LogFormatter
from .logger import Logger

__all__ = [
    "Logger",
    "LoggerFactory",
    "LogConfig",
    "LogConstants",
    "LogFormatter",
    "LogError",
    "InvalidLogLevelError",
    "resolve_level",
    "create_root_lg",
    "create_lg",
    "derive_lg",
    "null_lg",
]
