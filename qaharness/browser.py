"""Browser launch settings read from the process environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from qaharness.exceptions import ConfigError

BROWSER_TYPES = ("chromium", "firefox", "webkit")

_FALSE_VALUES = ("false", "0", "no")


@dataclass(frozen=True)
class BrowserSettings:
    """
    Which browser to launch and how.

    Example:
        settings = BrowserSettings.from_env()
        browser = getattr(playwright, settings.browser_type).launch(**settings.launch_options())
    """

    browser_type: str = "chromium"
    headless: bool = True
    slow_mo: int = 0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BrowserSettings:
        """
        Read ``HEADLESS``, ``BROWSER`` and ``SLOW_MO``.

        Raises:
            ConfigError: Unsupported browser type or non-integer ``SLOW_MO``
        """
        env = os.environ if environ is None else environ

        headless = env.get("HEADLESS", "").strip().lower() not in _FALSE_VALUES

        browser_type = (env.get("BROWSER") or "chromium").strip().lower()
        if browser_type not in BROWSER_TYPES:
            raise ConfigError(
                f"Unsupported browser type: {browser_type}. "
                f"Supported: {', '.join(BROWSER_TYPES)}",
                var="BROWSER",
            )

        raw_slow_mo = (env.get("SLOW_MO") or "0").strip()
        try:
            slow_mo = int(raw_slow_mo)
        except ValueError:
            raise ConfigError(f"SLOW_MO must be an integer, got '{raw_slow_mo}'", var="SLOW_MO") from None
        if slow_mo < 0:
            raise ConfigError(f"SLOW_MO must not be negative, got {slow_mo}", var="SLOW_MO")

        return cls(browser_type=browser_type, headless=headless, slow_mo=slow_mo)

    def launch_options(self) -> dict[str, Any]:
        """Keyword arguments for ``browser_type.launch``."""
        options: dict[str, Any] = {"headless": self.headless}
        if self.slow_mo:
            options["slow_mo"] = self.slow_mo
        return options
