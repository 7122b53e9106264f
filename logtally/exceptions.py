"""Exceptions raised by logtally.

Per-line decode problems are never raised; they are reported as exclusions.
Only failures that make the whole run meaningless surface as exceptions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class LogTallyError(Exception):
    """Base class for all logtally errors."""


class SourceError(LogTallyError):
    """The input file could not be opened or read to the end.

    Args:
        path: Input path as given by the caller.
        cause: Underlying exception (``OSError`` or ``UnicodeDecodeError``).
    """

    def __init__(self, path: Union[str, Path], cause: BaseException) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


class ConfigError(LogTallyError):
    """A configuration file is unreadable or holds invalid settings."""
