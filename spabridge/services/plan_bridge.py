"""
Facade over the file exchange with sp-automatisch.

``PlanCsvBridge`` binds one working directory and one configuration to the
writer, reader, merger and presence checks, so callers such as the CLI only
deal with a single object. The usual sequence is::

    with PlanCsvBridge() as bridge:
        bridge.write_plan(plan)
        ...  # run sp-automatisch on bridge.path
        if bridge.is_scheduled():
            bridge.read_schedule(plan)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..adapters.plan_reader import PlanReader
from ..adapters.plan_writer import PlanWriter
from ..adapters.presence import PresenceChecker
from ..adapters.schedule_merger import ScheduleMerger
from ..adapters.working_directory import WorkingDirectory
from ..config import BridgeConfig
from ..domain.models import Plan
from ..domain.results import OperationResult


class PlanCsvBridge:
    """
    Converts plans to the csv files of sp-automatisch and back.

    Without a path the bridge works in a temporary directory that is removed
    on ``release()`` or when leaving a ``with`` block.
    """

    def __init__(
        self,
        path: Optional[Path | str] = None,
        config: Optional[BridgeConfig] = None,
    ) -> None:
        self.config = config or BridgeConfig()
        self.directory = WorkingDirectory(path, result_directory=self.config.result_directory)
        self._presence = PresenceChecker(self.directory)
        self._writer = PlanWriter(self.directory, self.config)
        self._reader = PlanReader(self.directory, self.config)
        self._merger = ScheduleMerger(self.directory, self.config)

    @property
    def path(self) -> Path:
        """Directory containing the csv files."""
        return self.directory.path

    def write_plan(self, plan: Optional[Plan]) -> OperationResult:
        """Write the plan to the request files (and its schedule, if any)."""
        return self._writer.write_plan(plan)

    def read_plan(self) -> OperationResult:
        """Read a new, unscheduled plan from the request files."""
        return self._reader.read_plan()

    def read_schedule(self, plan: Optional[Plan]) -> OperationResult:
        """Merge the result files of sp-automatisch into the plan."""
        return self._merger.read_schedule(plan)

    def is_written(self) -> bool:
        return self._presence.is_written()

    def is_scheduled(self) -> bool:
        return self._presence.is_scheduled()

    def release(self) -> None:
        self.directory.release()

    def __enter__(self) -> "PlanCsvBridge":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
