"""
Adapters layer - File exchange with sp-automatisch.
"""

from .plan_reader import PlanReader
from .plan_writer import PlanWriter
from .presence import PresenceChecker
from .schedule_merger import ScheduleMerger
from .working_directory import REQUEST_FILES, RESULT_FILES, WellKnownFile, WorkingDirectory

__all__ = [
    "PlanReader",
    "PlanWriter",
    "PresenceChecker",
    "ScheduleMerger",
    "REQUEST_FILES",
    "RESULT_FILES",
    "WellKnownFile",
    "WorkingDirectory",
]
