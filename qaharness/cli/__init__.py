"""
Command line front-end.

Subcommands resolve the configuration through the same resolver tests use
and write through testable output writers.
"""

from qaharness.cli.cli import main
from qaharness.cli.output import BufferedOutput, ConsoleOutput

__all__ = [
    "main",
    "ConsoleOutput",
    "BufferedOutput",
]
