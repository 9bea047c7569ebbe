"""
Logging filter for secret masking.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .masking import SecretMasker


class SecretMaskingFilter(logging.Filter):
    """
    Logging filter that masks secrets in messages, arguments and extra fields.

    Without an explicit masker the process-wide one is looked up on each
    record, so secrets registered after the handler was built still apply.

    Example:
        handler.addFilter(SecretMaskingFilter())
        lg.info("connecting with password=super-secret-pass")
        # "connecting with password=[MASKED]"
    """

    def __init__(self, masker: SecretMasker | None = None, name: str = ""):
        super().__init__(name)
        self._masker = masker

    @property
    def masker(self) -> SecretMasker:
        if self._masker is not None:
            return self._masker
        from .masking import get_masker

        return get_masker()

    def _mask_value(self, value: Any) -> Any:
        return self.masker.mask(value) if isinstance(value, str) else value

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = self.masker.mask(str(record.msg))

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._mask_value(v) for k, v in record.args.items()}
            else:
                record.args = tuple(self._mask_value(arg) for arg in record.args)

        from qaharness.log.logger import EXTRA_ATTR

        extra = getattr(record, EXTRA_ATTR, None)
        if extra:
            setattr(record, EXTRA_ATTR, {k: self._mask_value(v) for k, v in extra.items()})

        if record.exc_text:
            record.exc_text = self.masker.mask(record.exc_text)

        return True
