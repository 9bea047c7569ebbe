"""
Secret masking for log and console output.

Example:
    from qaharness.security import get_masker

    masker = get_masker()
    masker.register_config(config)  # passwords and passphrases
    safe_text = masker.mask(text)
"""

from .filter import SecretMaskingFilter
from .masking import SecretMasker, get_masker, reset_masker
from .patterns import DEFAULT_PATTERNS, PATTERN_NAMES

__all__ = [
    "SecretMasker",
    "SecretMaskingFilter",
    "get_masker",
    "reset_masker",
    "DEFAULT_PATTERNS",
    "PATTERN_NAMES",
]
