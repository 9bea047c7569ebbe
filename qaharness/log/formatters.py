"""
Log formatters.

Output shape::

    [12:34:56,789] [I] configuration loaded        [env:T3] [group:test] [4242] [/harness/config]

Structured extra fields follow the message, padded to a fixed column, then
the process id and logger name.
"""

import logging
import os
import re
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants
from .logger import EXTRA_ATTR

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _visual_len(text: str) -> int:
    """Width of text excluding ANSI escape codes."""
    if "\x1b" not in text:
        return len(text)
    return len(_ANSI_PATTERN.sub("", text))


def _escape(value: Any) -> str:
    # Values end up inside a %-style format string
    return str(value).replace("%", "%%")


def _render_value(value: Any) -> str:
    if isinstance(value, BaseException):
        return value.__class__.__name__ + ": " + str(value)
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _get_extra(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, EXTRA_ATTR, None) or {}


class PreFormatter(logging.Formatter):
    """Formatter adding optional microsecond precision to timestamps."""

    def __init__(self, fmt: str, micros: bool) -> None:
        self._micros = micros
        super().__init__(fmt)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        s = super().formatTime(record, datefmt)
        if self._micros:
            micros = int((record.created % 1) * 1000000) % 1000
            s += f".{micros:03d}"
        return s


class LogFormatter(logging.Formatter):
    """
    Console/file formatter with optional colors and structured fields.

    Args:
        config: Logger configuration; ``colors``, ``micros`` and ``location``
            are read from it.
        colors: Override ``config.colors`` (file handlers pass False).
    """

    def __init__(self, config: LogConfig, colors: bool | None = None):
        super().__init__()
        self._config = config
        self._colors = config.colors if colors is None else colors
        self._pre_formatter = PreFormatter(LogConstants.DEFAULT_FORMAT, config.micros)

    def format(self, record: logging.LogRecord) -> str:
        fmt = self._build_format(record)
        self._pre_formatter._fmt = fmt
        self._pre_formatter._style._fmt = fmt
        return self._pre_formatter.format(record)

    def _calculate_width(self, record: logging.LogRecord) -> int:
        # "[" + timestamp + "] [" + level + "] " + message
        timestamp_len = 16 if self._config.micros else 12
        return 1 + timestamp_len + 4 + 1 + 2 + _visual_len(record.getMessage())

    def _padding(self, record: logging.LogRecord) -> str:
        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        return " " * max(1, rule - self._calculate_width(record))

    def _location(self, record: logging.LogRecord) -> str:
        if not self._config.location:
            return ""
        path = "./" + os.path.relpath(record.pathname, os.getcwd())
        return f" [{_escape(path)}:{record.lineno}]"

    def _build_format(self, record: logging.LogRecord) -> str:
        if self._colors:
            return self._build_colored(record)
        return self._build_plain(record)

    def _build_plain(self, record: logging.LogRecord) -> str:
        fmt = LogConstants.DEFAULT_FORMAT + self._padding(record)
        fields = [
            f"[{_escape(k)}:{_escape(_render_value(v))}]"
            for k, v in _get_extra(record).items()
        ]
        if fields:
            fmt += " ".join(fields) + " "
        fmt += "[%(process)d] [%(name)s]"
        return fmt + self._location(record)

    def _build_colored(self, record: logging.LogRecord) -> str:
        col = ColorManager.get_color_for_level(record.levelno)
        bold = ColorManager.create_bold_color(col)
        col += "m"
        reset = ColorManager.RESET

        fmt = col + "[%(asctime)s] [" + bold + "%(levelname).1s" + reset + col + "] "
        fmt += bold + "%(message)s" + reset + col + self._padding(record)
        for key, value in _get_extra(record).items():
            fmt += f"{_escape(key)}[{bold}{_escape(_render_value(value))}{reset}{col}] "

        gray = ColorManager.create_gray_level(9) + "m"
        fmt += gray + "[%(process)d] [%(name)s]"
        if self._config.location:
            fmt += ColorManager.create_gray_level(6) + "m" + self._location(record)
        return fmt + reset
