"""Exception hierarchy for LRG report parsing and writing."""

from pathlib import Path
from typing import Optional, Union


class ReportError(Exception):
    """Base exception for all report processing errors."""


class MalformedMarkupError(ReportError):
    """Raised when report markup cannot be turned into a consistent tree.

    The offset refers to the flattened markup string (whitespace-trimmed lines
    joined together), not to the original file.
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        tag: Optional[str] = None
    ) -> None:
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset
        self.tag = tag


class ReportFileError(ReportError):
    """Raised when a report file cannot be read or written."""

    def __init__(self, message: str, path: Union[str, Path, None] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class WriterError(ReportError):
    """Raised when the XML writer is driven into an inconsistent state."""
