"""
Factory for creating and configuring harness loggers.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, TextIO

from .config import LogConfig
from .constants import LogConstants
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def _console_handler(config: LogConfig, stream: TextIO | None) -> logging.Handler:
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(LogFormatter(config))
        return handler

    @staticmethod
    def _file_handler(config: LogConfig) -> logging.Handler:
        path = Path(config.file)  # type: ignore[arg-type]
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=LogConstants.FILE_MAX_BYTES,
            backupCount=LogConstants.FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setFormatter(LogFormatter(config, colors=False))
        return handler

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        extra: dict[str, Any] | None = None,
        stream: TextIO | None = None,
        mask_secrets: bool = True,
    ) -> Logger:
        """
        Create a logger with a console handler and, if configured, a file handler.

        Args:
            name: Logger name
            config: Logger configuration
            extra: Pre-populated extra fields for every record
            stream: Console stream (defaults to stdout)
            mask_secrets: Attach the global secret-masking filter to every handler

        Returns:
            Configured logger. Loggers are not registered with the stdlib
            logging manager, so each call yields an independent instance.

        Example:
            >>> lg = LoggerFactory.create("/harness", LogConfig.from_params("debug"))
            >>> lg.info("resolved", extra={"env": "T3"})
            [12:34:56,789] [I] resolved          [env:T3] [1234] [/harness]
        """
        lg = Logger(name, config, extra)
        lg.propagate = False
        if config.level is False:
            return lg

        handlers = [LoggerFactory._console_handler(config, stream)]
        if config.file:
            handlers.append(LoggerFactory._file_handler(config))

        for handler in handlers:
            if mask_secrets:
                from qaharness.security import SecretMaskingFilter

                handler.addFilter(SecretMaskingFilter())
            lg.addHandler(handler)
        return lg

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a "view" logger that emits through the root's handlers.

        Examples:
            >>> root = LoggerFactory.create("/", config)
            >>> LoggerFactory.derive(root, "config").name
            '/config'
            >>> LoggerFactory.derive(root, ["certs", "pfx"]).name
            '/certs/pfx'
        """
        if isinstance(tags, str):
            tags = [tags]
        prefix = parent.name if parent.name.endswith("/") else parent.name + "/"
        lg = Logger(prefix + "/".join(tags), parent.config, parent._extra)
        lg.setLevel(parent.level)
        lg.disabled = parent.disabled
        lg._root_logger = parent.root_logger
        lg.parent = parent
        lg.propagate = False
        return lg


def create_root_lg(
    level: str | int | bool = "info",
    location: bool = False,
    micros: bool = False,
    colors: bool = True,
    file: str | None = None,
) -> Logger:
    """
    Create the root harness logger named "/".

    Example:
        >>> lg = create_root_lg("debug", location=True)
    """
    config = LogConfig.from_params(level, location, micros, colors, file)
    return LoggerFactory.create("/", config)


def create_lg(name: str, config: LogConfig | None = None) -> Logger:
    """Create a named logger, reading ``LOG_LEVEL``/``LOG_FILE`` when no config is given."""
    return LoggerFactory.create(name, config if config is not None else LogConfig.from_env())


def derive_lg(lg: Logger, tags: str | list[str]) -> Logger:
    """Derive a component logger from ``lg``."""
    return LoggerFactory.derive(lg, tags)


def null_lg() -> Logger:
    """Logger that drops everything; handy default for library callers and tests."""
    return LoggerFactory.create("/null", LogConfig(level=False))
