"""
Existence checks telling callers which bridge operation is possible next.
"""

from .working_directory import REQUEST_FILES, RESULT_FILES, WorkingDirectory


class PresenceChecker:
    """Checks which exchange files exist. File contents are never opened."""

    def __init__(self, directory: WorkingDirectory):
        self.directory = directory

    def is_written(self) -> bool:
        """Check that all four request files for sp-automatisch exist."""
        return all(self.directory.path_of(file).is_file() for file in REQUEST_FILES)

    def is_scheduled(self) -> bool:
        """Check that both result files of sp-automatisch exist."""
        return all(self.directory.result_path_of(file).is_file() for file in RESULT_FILES)
