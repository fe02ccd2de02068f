"""
Domain layer - Exam plan model and block codes, no file I/O.
"""

from .block_codes import BLOCK_CODES, BlockCodeTable, BlockCoordinate, Weekday
from .exceptions import (
    BridgeError,
    ErrorKind,
    IOFailureError,
    MalformedRecordError,
    MissingTargetError,
    UnknownReferenceError,
)
from .models import Day, ExamInterval, ExamType, Group, GroupModule, Module, Plan, Timeslot, Week
from .results import OperationResult

__all__ = [
    "BLOCK_CODES",
    "BlockCodeTable",
    "BlockCoordinate",
    "Weekday",
    "BridgeError",
    "ErrorKind",
    "IOFailureError",
    "MalformedRecordError",
    "MissingTargetError",
    "UnknownReferenceError",
    "Day",
    "ExamInterval",
    "ExamType",
    "Group",
    "GroupModule",
    "Module",
    "Plan",
    "Timeslot",
    "Week",
    "OperationResult",
]
