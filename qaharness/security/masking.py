"""
Secret masking.

SecretMasker replaces secrets found by regex patterns, plus explicitly
registered known values (the passwords and passphrases of the resolved
configuration), with a mask string.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from re import Pattern
from typing import TYPE_CHECKING

from .patterns import DEFAULT_PATTERNS

if TYPE_CHECKING:
    from qaharness.config.schemas import ResolvedConfig

# Known secrets shorter than this are ignored to avoid masking common words
MIN_SECRET_LENGTH = 4


class SecretMasker:
    """
    Detect and mask secrets in strings.

    Example:
        masker = SecretMasker()
        masker.mask("PG_PASSWORD=hunter2-long")
        # "PG_PASSWORD=[MASKED]"

        masker.add_known_secret("Password123")
        masker.mask("logging in with Password123")
        # "logging in with [MASKED]"
    """

    DEFAULT_MASK = "[MASKED]"

    def __init__(
        self,
        *,
        patterns: list[str] | None = None,
        mask: str = DEFAULT_MASK,
        enabled: bool = True,
    ):
        self._mask = mask
        self._enabled = enabled
        self._patterns: list[Pattern[str]] = []
        self._known_secrets: set[str] = set()
        self._known_regex: Pattern[str] | None = None

        for pattern in patterns if patterns is not None else DEFAULT_PATTERNS:
            self.add_pattern(pattern)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def mask_string(self) -> str:
        return self._mask

    def add_pattern(self, pattern: str) -> None:
        """
        Add a regex pattern for secret detection.

        Raises:
            re.error: If the pattern is invalid
        """
        self._patterns.append(re.compile(pattern))

    def add_known_secret(self, secret: str | None) -> None:
        """Register a literal secret value (None and very short values are ignored)."""
        if secret and len(secret) >= MIN_SECRET_LENGTH:
            self._known_secrets.add(secret)
            self._known_regex = None

    def add_known_secrets(self, secrets: Iterable[str | None]) -> None:
        for secret in secrets:
            self.add_known_secret(secret)

    def register_config(self, config: ResolvedConfig) -> None:
        """Register every password and passphrase of a resolved configuration."""
        self.add_known_secrets(config.secrets())

    def clear_known_secrets(self) -> None:
        self._known_secrets.clear()
        self._known_regex = None

    def mask(self, text: str) -> str:
        """
        Mask secrets in the given text.

        Known secrets are replaced first, longest first, so a secret that
        contains another registered secret is masked whole. They only match
        as whole tokens: a secret "harness" leaves "qaharness" untouched.
        """
        if not self._enabled or not text:
            return text

        result = text
        if self._known_secrets:
            result = self._known_pattern().sub(self._mask, result)
        for pattern in self._patterns:
            result = self._mask_pattern(result, pattern)
        return result

    def _known_pattern(self) -> Pattern[str]:
        if self._known_regex is None:
            alternatives = "|".join(
                re.escape(secret) for secret in sorted(self._known_secrets, key=len, reverse=True)
            )
            self._known_regex = re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)")
        return self._known_regex

    def _mask_pattern(self, text: str, pattern: Pattern[str]) -> str:
        def replacer(match: re.Match[str]) -> str:
            secret_value = next((g for g in reversed(match.groups()) if g), None)
            if not secret_value or secret_value == self._mask:
                return match.group(0)
            return match.group(0).replace(secret_value, self._mask)

        return pattern.sub(replacer, text)

    def is_secret(self, text: str) -> bool:
        """Check whether text is a known secret or matches a secret pattern."""
        if not text:
            return False
        if text in self._known_secrets:
            return True
        return any(pattern.search(text) for pattern in self._patterns)


_global_masker: SecretMasker | None = None


def get_masker() -> SecretMasker:
    """Get or create the process-wide masker used by logging filters."""
    global _global_masker

    if _global_masker is None:
        _global_masker = SecretMasker()
    return _global_masker


def reset_masker() -> None:
    """Drop the process-wide masker (tests)."""
    global _global_masker
    _global_masker = None
