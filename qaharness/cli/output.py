"""
Output abstraction for the command line.

Commands write through an OutputWriter instead of printing, so tests can
capture lines without patching stdout, and every line can pass through the
secret masker on its way out.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from qaharness.security import SecretMasker


class OutputWriter(Protocol):
    """Protocol for CLI output writing."""

    def write(self, text: str = "") -> None:
        """Write text with trailing newline."""
        ...


class ConsoleOutput:
    """
    Writes to a stream (stdout by default), masking secrets when a masker is given.

    Example:
        out = ConsoleOutput(masker=get_masker())
        out.write(f"password is {password}")   # "password is [MASKED]"
    """

    def __init__(self, stream: TextIO | None = None, masker: SecretMasker | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._masker = masker

    def write(self, text: str = "") -> None:
        if self._masker is not None:
            text = self._masker.mask(text)
        print(text, file=self._stream)

    def flush(self) -> None:
        self._stream.flush()


class BufferedOutput:
    """
    Captures output lines in memory.

    Example:
        out = BufferedOutput()
        main(["envs"], out=out)
        assert any(line.startswith("T3") for line in out.lines)
    """

    def __init__(self, masker: SecretMasker | None = None) -> None:
        self._lines: list[str] = []
        self._masker = masker

    def write(self, text: str = "") -> None:
        if self._masker is not None:
            text = self._masker.mask(text)
        # Multi-line blocks (yaml/json dumps) are stored line by line
        self._lines.extend(text.split("\n"))

    @property
    def lines(self) -> list[str]:
        return self._lines.copy()

    @property
    def text(self) -> str:
        return "\n".join(self._lines) + ("\n" if self._lines else "")

    def clear(self) -> None:
        self._lines.clear()
