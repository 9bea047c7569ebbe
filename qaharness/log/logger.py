"""
Logger class carrying structured extra fields.

Extra fields passed via ``extra={...}`` are kept together on the record
(instead of being spread as record attributes) so the formatter can render
them as ``[key:value]`` pairs.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import LogConfig

EXTRA_ATTR = "__harness__extra"


class Logger(logging.Logger):
    """
    Logger with pre-populated extra fields and derived "view" loggers.

    A derived logger has its own name and level but emits through the
    handlers of its root logger, so adding a handler to the root is enough
    for every component logger to see it.
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | None = None,
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name
            config: Logger configuration (defaults to info level)
            extra: Extra fields attached to every record from this logger
        """
        if config is None:
            config = LogConfig()
        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self.disabled = True
        else:
            super().__init__(name, config.level)
        self._config = config
        self._extra = dict(extra or {})
        self._root_logger: Logger | None = None

    @property
    def config(self) -> LogConfig:
        return self._config

    @property
    def root_logger(self) -> Logger:
        """The logger whose handlers this logger emits through."""
        return self._root_logger if self._root_logger is not None else self

    def makeRecord(  # type: ignore[override]
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: object,
        args: Any,
        exc_info: Any,
        func: str | None = None,
        extra: dict[str, Any] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, sinfo=sinfo
        )
        merged = dict(self._extra)
        if extra:
            merged.update(extra)
        setattr(record, EXTRA_ATTR, merged)
        return record

    def callHandlers(self, record: logging.LogRecord) -> None:
        if self._root_logger is None:
            super().callHandlers(record)
            return
        for handler in self._root_logger.handlers:
            if record.levelno >= handler.level:
                handler.handle(record)
