"""
Writes a plan to the request files read by sp-automatisch.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator, List, Optional, Tuple

from ..config import BridgeConfig
from ..domain.block_codes import BLOCK_CODES
from ..domain.exceptions import BridgeError, IOFailureError, MalformedRecordError, MissingTargetError
from ..domain.models import Group, Module, Plan
from ..domain.results import OperationResult
from .csv_records import COMMENT_PREFIX, HEADERS, write_records
from .working_directory import REQUEST_FILES, RESULT_FILES, WellKnownFile, WorkingDirectory

logger = logging.getLogger(__name__)


class PlanWriter:
    """
    Serializes a plan into the four request files.

    If the plan already carries assignments they are written to the
    schedule result file as well. The group result file is only ever
    produced by sp-automatisch itself.
    """

    def __init__(self, directory: WorkingDirectory, config: Optional[BridgeConfig] = None):
        self.directory = directory
        self.config = config or BridgeConfig()

    def write_plan(self, plan: Optional[Plan]) -> OperationResult:
        """
        Write the plan to the working directory.

        Files are written one after another; if one fails, files written
        before it are kept. A module number or group name the reader could
        not get back unchanged fails the write before any file is touched.

        Returns:
            Successful result, or the reason the plan could not be written
        """
        try:
            self._check_target(plan)
            self._check_identifiers(plan)
            self._remove_stale_files()
            self._write_exams_intervals_file(plan)
            self._write_exams_file(plan)
            self._write_groups_exams_file(plan)
            self._write_groups_exams_pref_file(plan)
            if plan.is_scheduled():
                self._write_planning_exams_result_file(plan)
        except BridgeError as exc:
            logger.warning("Could not write plan to %s: %s", self.directory.path, exc)
            return OperationResult.failure(exc)

        logger.info("Wrote plan with %d module(s) to %s", len(plan.modules), self.directory.path)
        return OperationResult.success(plan)

    def _check_target(self, plan: Optional[Plan]) -> None:
        if plan is None:
            raise MissingTargetError("no plan given")
        if not self.directory.exists():
            raise MissingTargetError(
                "target directory does not exist", path=self.directory.path
            )
        if not os.access(self.directory.path, os.W_OK | os.X_OK):
            raise IOFailureError("target directory is not writable", path=self.directory.path)

    def _check_identifiers(self, plan: Plan) -> None:
        """
        Reject module numbers and group names that would not read back unchanged.

        The reader strips fields and, with ``skip_comments``, drops rows whose
        first field starts with the comment prefix.
        """
        for module in plan.modules:
            if self._is_written(module):
                self._check_identifier("module number", module.number, WellKnownFile.EXAMS)
        for group in plan.groups:
            if any(True for _ in self._group_links(group)):
                self._check_identifier("group name", group.name, WellKnownFile.GROUPS_EXAMS_PREF)

    def _check_identifier(self, kind: str, value: str, file: WellKnownFile) -> None:
        if not value:
            problem = "must not be empty"
        elif value != value.strip():
            problem = "must not start or end with whitespace"
        elif self.config.skip_comments and value.startswith(COMMENT_PREFIX):
            problem = f"must not start with {COMMENT_PREFIX!r}"
        else:
            return
        raise MalformedRecordError(f"{kind} {value!r} {problem}", path=self.directory.path_of(file))

    def _remove_stale_files(self) -> None:
        """Remove exchange files of an earlier run."""
        for file in REQUEST_FILES + RESULT_FILES:
            path = self.directory.path_of(file)
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise IOFailureError(f"cannot remove old file: {exc.strerror or exc}", path=path) from exc

    def _is_written(self, module: Module) -> bool:
        return not self.config.is_excluded(module.origin)

    def _write(self, file: WellKnownFile, rows) -> None:
        count = write_records(self.directory.path_of(file), HEADERS[file], rows, self.config)
        logger.debug("%s: %d row(s)", file.filename, count)

    def _write_exams_intervals_file(self, plan: Plan) -> None:
        date_format = self.config.date_format
        rows = []
        for week in plan.weeks:
            interval = plan.interval_for(week.number)
            rows.append((
                week.number,
                interval.start.format(date_format) if interval.start else "",
                interval.end.format(date_format) if interval.end else "",
            ))
        self._write(WellKnownFile.EXAMS_INTERVALS, rows)

    def _write_exams_file(self, plan: Plan) -> None:
        rows = [
            (module.number, module.name, module.exam_type.value, module.exam_duration)
            for module in plan.modules
            if self._is_written(module)
        ]
        self._write(WellKnownFile.EXAMS, rows)

    def _group_links(self, group: Group) -> Iterator[Tuple[Module, int]]:
        for link in group.modules:
            if self._is_written(link.module):
                yield link.module, link.preference

    def _write_groups_exams_file(self, plan: Plan) -> None:
        rows = [
            (group.name, group.exams_per_day, module.number)
            for group in plan.groups
            if group.selected
            for module, _ in self._group_links(group)
        ]
        self._write(WellKnownFile.GROUPS_EXAMS, rows)

    def _write_groups_exams_pref_file(self, plan: Plan) -> None:
        rows = [
            (group.name, module.number, preference)
            for group in plan.groups
            for module, preference in self._group_links(group)
        ]
        self._write(WellKnownFile.GROUPS_EXAMS_PREF, rows)

    def _write_planning_exams_result_file(self, plan: Plan) -> None:
        rows: List[Tuple[str, str]] = [
            (module.number, BLOCK_CODES.code_for(coordinate))
            for module, coordinate in plan.assignments()
            if self._is_written(module)
        ]
        result_path = self.directory.result_path
        try:
            result_path.mkdir(exist_ok=True)
        except OSError as exc:
            raise IOFailureError(
                f"cannot create result directory: {exc.strerror or exc}", path=result_path
            ) from exc
        self._write(WellKnownFile.PLANNING_EXAMS_RESULT, rows)
