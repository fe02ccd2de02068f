"""
Result values returned by the public bridge operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .exceptions import BridgeError, ErrorKind

if TYPE_CHECKING:
    from .models import Plan


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a bridge operation.

    Truthy on success. On failure ``kind`` says why and ``path``/``line``
    point at the offending file and row when known.
    """
    kind: Optional[ErrorKind] = None
    message: str = ""
    path: Optional[Path] = None
    line: Optional[int] = None
    plan: Optional["Plan"] = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, plan: Optional["Plan"] = None) -> "OperationResult":
        return cls(plan=plan)

    @classmethod
    def failure(cls, error: BridgeError) -> "OperationResult":
        return cls(kind=error.kind, message=str(error), path=error.path, line=error.line)

    def __str__(self) -> str:
        if self.ok:
            return "ok"
        return f"{self.kind.value}: {self.message}"
