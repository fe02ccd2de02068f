"""
Directory holding the files exchanged with sp-automatisch.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import weakref
from enum import Enum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class WellKnownFile(str, Enum):
    """The six files of the sp-automatisch exchange."""
    EXAMS_INTERVALS = "pruef-intervalle.csv"
    EXAMS = "pruefungen.csv"
    GROUPS_EXAMS = "zuege-pruef.csv"
    GROUPS_EXAMS_PREF = "zuege-pruef-pref2.csv"
    PLANNING_EXAMS_RESULT = "SPA-planung-pruef.csv"
    GROUPS_EXAMS_RESULT = "SPA-zuege-pruef.csv"

    @property
    def filename(self) -> str:
        return self.value

    @property
    def is_result(self) -> bool:
        """Result files live in the result subdirectory."""
        return self in RESULT_FILES


REQUEST_FILES = (
    WellKnownFile.EXAMS_INTERVALS,
    WellKnownFile.EXAMS,
    WellKnownFile.GROUPS_EXAMS,
    WellKnownFile.GROUPS_EXAMS_PREF,
)

RESULT_FILES = (
    WellKnownFile.PLANNING_EXAMS_RESULT,
    WellKnownFile.GROUPS_EXAMS_RESULT,
)


def _remove_directory(path: str) -> None:
    shutil.rmtree(path, ignore_errors=True)
    logger.debug("Removed temporary directory %s", path)


class WorkingDirectory:
    """
    Handle to the directory containing the exchange files.

    Bound to a given path the directory is never touched on release. Created
    without a path it owns a fresh temporary directory, which is removed by
    ``release()``, when leaving a ``with`` block, or when the handle is
    garbage collected.
    """

    def __init__(self, path: Optional[Path | str] = None, result_directory: str = "SPA-ERGEBNIS-PP"):
        self.result_directory = result_directory

        if path is None:
            self._path = Path(tempfile.mkdtemp(prefix="spabridge-"))
            self._finalizer: Optional[weakref.finalize] = weakref.finalize(
                self, _remove_directory, str(self._path)
            )
            logger.debug("Created temporary directory %s", self._path)
        else:
            self._path = Path(path)
            self._finalizer = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def owned(self) -> bool:
        """True while the handle owns a temporary directory that still exists."""
        return self._finalizer is not None and self._finalizer.alive

    @property
    def result_path(self) -> Path:
        return self._path / self.result_directory

    def path_of(self, file: WellKnownFile) -> Path:
        """Resolve a well-known file, result files inside the result subdirectory."""
        if file.is_result:
            return self.result_path_of(file)
        return self._path / file.filename

    def result_path_of(self, file: WellKnownFile) -> Path:
        """Resolve a file inside the result subdirectory."""
        return self.result_path / file.filename

    def exists(self) -> bool:
        return self._path.is_dir()

    def release(self) -> None:
        """Remove the temporary directory if this handle owns one."""
        if self._finalizer is not None:
            self._finalizer()

    def __enter__(self) -> "WorkingDirectory":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"WorkingDirectory({str(self._path)!r}, owned={self.owned})"
