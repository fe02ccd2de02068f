"""
Domain-specific exception hierarchy for the sp-automatisch bridge.
"""

from enum import Enum
from pathlib import Path
from typing import Optional


class ErrorKind(str, Enum):
    """Why a bridge operation failed."""
    MISSING_TARGET = "missing_target"
    MALFORMED_RECORD = "malformed_record"
    UNKNOWN_REFERENCE = "unknown_reference"
    IO_FAILURE = "io_failure"


class BridgeError(Exception):
    """Base class for all bridge errors."""

    kind: ErrorKind = ErrorKind.IO_FAILURE

    def __init__(self, message: str, path: Optional[Path] = None, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line

    def __str__(self) -> str:
        if self.path is not None and self.line is not None:
            return f"{self.path.name}:{self.line}: {self.message}"
        if self.path is not None:
            return f"{self.path.name}: {self.message}"
        return self.message


class MissingTargetError(BridgeError):
    """Raised when the plan, the directory or a required file is absent."""
    kind = ErrorKind.MISSING_TARGET


class MalformedRecordError(BridgeError):
    """Raised when a row cannot be parsed into the expected fields."""
    kind = ErrorKind.MALFORMED_RECORD


class UnknownReferenceError(BridgeError):
    """Raised when a row names a module, group or block code that is not known."""
    kind = ErrorKind.UNKNOWN_REFERENCE


class IOFailureError(BridgeError):
    """Raised when a file cannot be opened for the requested mode."""
    kind = ErrorKind.IO_FAILURE
