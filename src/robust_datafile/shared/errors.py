"""Exception hierarchy for datafile reading and writing.

Only I/O-level failures are errors. Everything that can go wrong inside a
document degrades to a default value or a no-op and is reported through
diagnostics instead (see :mod:`robust_datafile.shared.result`).
"""

from pathlib import Path
from typing import Optional, Union

SourceType = Union[str, Path, None]


class DatafileError(Exception):
    """Base exception for all datafile errors."""


class SourceUnreadableError(DatafileError):
    """Raised when the line source cannot be obtained.

    Covers a missing file, a path that is not a regular file, permission
    problems, any other ``OSError`` and decoding failures. Always raised
    before the target tree is touched.
    """

    def __init__(self, message: str, source: SourceType = None,
                 reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = str(source) if source is not None else None
        self.reason = reason


class SinkUnwritableError(DatafileError):
    """Raised when the serialized buffer cannot be written in full."""

    def __init__(self, message: str, destination: SourceType = None,
                 reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.destination = str(destination) if destination is not None else None
        self.reason = reason
