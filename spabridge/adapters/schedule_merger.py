"""
Merges the schedule computed by sp-automatisch into a plan.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..config import BridgeConfig
from ..domain.block_codes import BLOCK_CODES
from ..domain.exceptions import BridgeError, MissingTargetError, UnknownReferenceError
from ..domain.models import Module, Plan, Timeslot
from ..domain.results import OperationResult
from .csv_records import HEADERS, Record, read_records
from .working_directory import RESULT_FILES, WellKnownFile, WorkingDirectory

logger = logging.getLogger(__name__)


class ScheduleMerger:
    """
    Applies the result files of sp-automatisch to an existing plan.

    Algorithm:
    1. Parse both result files, staging (module, timeslot) pairs
    2. Cross-check the group results against the staged pairs
    3. Remove every staged module from every timeslot of the plan
    4. Insert every staged module into its new timeslot

    Steps 3 and 4 only run once the first two succeeded, so a failed merge
    leaves the plan untouched and every merged module ends up in exactly
    one timeslot.
    """

    def __init__(self, directory: WorkingDirectory, config: Optional[BridgeConfig] = None):
        self.directory = directory
        self.config = config or BridgeConfig()

    def read_schedule(self, plan: Optional[Plan]) -> OperationResult:
        """
        Add the scheduling information from the result files to the plan.

        Old assignments of the modules contained in the result files are
        replaced. Modules not mentioned there keep their assignments.

        Returns:
            Result carrying the plan, or the reason the merge failed
        """
        try:
            if plan is None:
                raise MissingTargetError("no plan given")
            for file in RESULT_FILES:
                path = self.directory.result_path_of(file)
                if not path.is_file():
                    raise MissingTargetError("required result file does not exist", path=path)

            staged = self._read_planning_exams_result_file(plan)
            self._read_groups_exams_result_file(plan, staged)
        except BridgeError as exc:
            logger.warning("Could not read schedule from %s: %s", self.directory.path, exc)
            return OperationResult.failure(exc)

        self._apply(plan, staged)
        logger.info("Merged %d scheduled module(s) from %s", len(staged), self.directory.path)
        return OperationResult.success(plan)

    def _records(self, file: WellKnownFile) -> List[Record]:
        return read_records(self.directory.result_path_of(file), HEADERS[file], self.config)

    @staticmethod
    def _resolve_module(plan: Plan, record: Record, number: str) -> Module:
        module = plan.find_module(number)
        if module is None:
            raise UnknownReferenceError(
                f"module {number!r} is not part of the plan", path=record.path, line=record.line
            )
        return module

    @staticmethod
    def _resolve_timeslot(plan: Plan, record: Record, code: str) -> Timeslot:
        coordinate = BLOCK_CODES.coordinate_for(code)
        if coordinate is None:
            raise UnknownReferenceError(
                f"unknown block code {code!r}", path=record.path, line=record.line
            )
        try:
            return plan.timeslot(coordinate)
        except LookupError:
            raise UnknownReferenceError(
                f"block {code} has no timeslot in the plan", path=record.path, line=record.line
            ) from None

    def _read_planning_exams_result_file(self, plan: Plan) -> Dict[str, Tuple[Module, Timeslot]]:
        staged: Dict[str, Tuple[Module, Timeslot]] = {}

        for record in self._records(WellKnownFile.PLANNING_EXAMS_RESULT):
            number, code = record.fields
            module = self._resolve_module(plan, record, number)
            timeslot = self._resolve_timeslot(plan, record, code)

            previous = staged.get(number)
            if previous is not None and previous[1] is not timeslot:
                raise record.malformed(
                    f"module {number} is scheduled twice "
                    f"({BLOCK_CODES.code_for(previous[1].coordinate)} and {code})"
                )
            staged[number] = (module, timeslot)

        return staged

    def _read_groups_exams_result_file(
        self, plan: Plan, staged: Dict[str, Tuple[Module, Timeslot]]
    ) -> None:
        # The group results repeat the module schedule per group; they must not
        # contradict the schedule result file.
        records = self._records(WellKnownFile.GROUPS_EXAMS_RESULT)
        if not self.config.cross_check_group_results:
            return

        for record in records:
            name, number, code = record.fields
            group = plan.find_group(name)
            if group is None:
                raise UnknownReferenceError(
                    f"group {name!r} is not part of the plan", path=record.path, line=record.line
                )
            module = self._resolve_module(plan, record, number)
            timeslot = self._resolve_timeslot(plan, record, code)

            if group.link_for(module) is None:
                raise UnknownReferenceError(
                    f"group {name!r} does not take module {number!r}",
                    path=record.path,
                    line=record.line,
                )
            scheduled = staged.get(number)
            if scheduled is None:
                raise record.malformed(
                    f"module {number} is missing in "
                    f"{WellKnownFile.PLANNING_EXAMS_RESULT.filename}"
                )
            if scheduled[1] is not timeslot:
                raise record.malformed(
                    f"module {number} is scheduled at "
                    f"{BLOCK_CODES.code_for(scheduled[1].coordinate)}, "
                    f"but at {code} for group {name!r}"
                )

    @staticmethod
    def _apply(plan: Plan, staged: Dict[str, Tuple[Module, Timeslot]]) -> None:
        for module, _ in staged.values():
            plan.unschedule(module)
        for module, timeslot in staged.values():
            timeslot.add_module(module)
