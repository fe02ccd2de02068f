"""
Reads a plan from the request files written for sp-automatisch.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pendulum
from pendulum import Date

from ..config import BridgeConfig
from ..domain.block_codes import WEEK_COUNT
from ..domain.exceptions import (
    BridgeError,
    MalformedRecordError,
    MissingTargetError,
    UnknownReferenceError,
)
from ..domain.models import ExamInterval, ExamType, Group, Module, Plan
from ..domain.results import OperationResult
from .csv_records import HEADERS, Record, read_records
from .working_directory import REQUEST_FILES, WellKnownFile, WorkingDirectory

logger = logging.getLogger(__name__)


def parse_int(record: Record, index: int, column: str, minimum: int = 0) -> int:
    """Parse an integer field, raising a malformed record error with its position."""
    text = record.fields[index]
    try:
        value = int(text)
    except ValueError:
        raise record.malformed(f"{column} must be an integer, got {text!r}") from None
    if value < minimum:
        raise record.malformed(f"{column} must be at least {minimum}, got {value}")
    return value


class PlanReader:
    """
    Builds a new plan from the four request files.

    Parsing happens into a scratch plan that is only handed out if every
    file was read successfully. The plan carries no assignments; those come
    from the result files via ``ScheduleMerger``.
    """

    def __init__(self, directory: WorkingDirectory, config: Optional[BridgeConfig] = None):
        self.directory = directory
        self.config = config or BridgeConfig()

    def read_plan(self) -> OperationResult:
        """
        Read the plan from the working directory.

        Returns:
            Result carrying the plan, or the reason it could not be read
        """
        plan = Plan.create()
        try:
            for file in REQUEST_FILES:
                # Fail before parsing anything if the file set is incomplete
                path = self.directory.path_of(file)
                if not path.is_file():
                    raise MissingTargetError("required file does not exist", path=path)
            self._read_exams_intervals_file(plan)
            self._read_exams_file(plan)
            self._read_groups_exams_file(plan)
            self._read_groups_exams_pref_file(plan)
        except BridgeError as exc:
            logger.warning("Could not read plan from %s: %s", self.directory.path, exc)
            return OperationResult.failure(exc)

        logger.info(
            "Read plan with %d module(s) and %d group(s) from %s",
            len(plan.modules),
            len(plan.groups),
            self.directory.path,
        )
        return OperationResult.success(plan)

    def _records(self, file: WellKnownFile) -> List[Record]:
        return read_records(self.directory.path_of(file), HEADERS[file], self.config)

    def _parse_date(self, record: Record, index: int, column: str) -> Optional[Date]:
        text = record.fields[index]
        if not text:
            return None
        try:
            return pendulum.from_format(text, self.config.date_format).date()
        except ValueError:
            raise record.malformed(
                f"{column} must be a date in format {self.config.date_format}, got {text!r}"
            ) from None

    def _read_exams_intervals_file(self, plan: Plan) -> None:
        intervals: Dict[int, ExamInterval] = {}

        for record in self._records(WellKnownFile.EXAMS_INTERVALS):
            week = parse_int(record, 0, "Woche", minimum=1)
            if week > WEEK_COUNT:
                raise record.malformed(f"Woche must be at most {WEEK_COUNT}, got {week}")
            if week in intervals:
                raise record.malformed(f"week {week} is listed twice")

            start = self._parse_date(record, 1, "Beginn")
            end = self._parse_date(record, 2, "Ende")
            try:
                intervals[week] = ExamInterval(week=week, start=start, end=end)
            except ValueError as exc:
                raise record.malformed(str(exc)) from None

        missing = [week for week in range(1, WEEK_COUNT + 1) if week not in intervals]
        if missing:
            raise MalformedRecordError(
                f"missing interval for week(s) {', '.join(str(w) for w in missing)}",
                path=self.directory.path_of(WellKnownFile.EXAMS_INTERVALS),
            )

        plan.intervals = [intervals[week] for week in sorted(intervals)]

    def _read_exams_file(self, plan: Plan) -> None:
        for record in self._records(WellKnownFile.EXAMS):
            number, name, form, _ = record.fields
            if not number:
                raise record.malformed("Nummer must not be empty")
            try:
                exam_type = ExamType(form)
            except ValueError:
                raise record.malformed(f"Form must be K or P, got {form!r}") from None
            duration = parse_int(record, 3, "Dauer", minimum=1)

            if plan.find_module(number) is not None:
                raise record.malformed(f"module {number} is listed twice")
            plan.add_module(
                Module(number=number, name=name, exam_type=exam_type, exam_duration=duration)
            )

    def _find_module(self, plan: Plan, record: Record, number: str) -> Module:
        module = plan.find_module(number)
        if module is None:
            raise UnknownReferenceError(
                f"module {number!r} is not listed in {WellKnownFile.EXAMS.filename}",
                path=record.path,
                line=record.line,
            )
        return module

    def _read_groups_exams_file(self, plan: Plan) -> None:
        for record in self._records(WellKnownFile.GROUPS_EXAMS):
            name, _, number = record.fields
            if not name:
                raise record.malformed("Zug must not be empty")
            exams_per_day = parse_int(record, 1, "ProTag")
            module = self._find_module(plan, record, number)

            group = plan.find_group(name)
            if group is None:
                group = plan.add_group(Group(name=name, selected=True, exams_per_day=exams_per_day))
            elif group.exams_per_day != exams_per_day:
                raise record.malformed(
                    f"group {name!r} has conflicting exams per day "
                    f"({group.exams_per_day} and {exams_per_day})"
                )
            group.add_module(module)

    def _read_groups_exams_pref_file(self, plan: Plan) -> None:
        declared = {group.name for group in plan.groups}

        for record in self._records(WellKnownFile.GROUPS_EXAMS_PREF):
            name, number, _ = record.fields
            if not name:
                raise record.malformed("Zug must not be empty")
            module = self._find_module(plan, record, number)
            preference = parse_int(record, 2, "Praeferenz")

            group = plan.find_group(name)
            if group is None:
                if not self.config.add_missing_groups:
                    raise UnknownReferenceError(
                        f"group {name!r} is not listed in {WellKnownFile.GROUPS_EXAMS.filename}",
                        path=record.path,
                        line=record.line,
                    )
                group = plan.add_group(Group(name=name, selected=False))
                logger.debug("Added unselected group %s from %s", name, record.path.name)

            if name in declared:
                link = group.link_for(module)
                if link is None:
                    raise UnknownReferenceError(
                        f"group {name!r} does not take module {number!r}",
                        path=record.path,
                        line=record.line,
                    )
                link.preference = preference
            else:
                group.add_module(module).preference = preference
