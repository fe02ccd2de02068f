"""
Reading and writing the delimited record files of sp-automatisch.

Every file starts with a header row naming its columns. Rows are returned
with their line number so parse errors can point at the offending line.
"""

from __future__ import annotations

import csv
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

from ..config import BridgeConfig
from ..domain.exceptions import IOFailureError, MalformedRecordError, MissingTargetError
from .working_directory import WellKnownFile

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"

HEADERS = {
    WellKnownFile.EXAMS_INTERVALS: ("Woche", "Beginn", "Ende"),
    WellKnownFile.EXAMS: ("Nummer", "Name", "Form", "Dauer"),
    WellKnownFile.GROUPS_EXAMS: ("Zug", "ProTag", "Nummer"),
    WellKnownFile.GROUPS_EXAMS_PREF: ("Zug", "Nummer", "Praeferenz"),
    WellKnownFile.PLANNING_EXAMS_RESULT: ("Nummer", "Block"),
    WellKnownFile.GROUPS_EXAMS_RESULT: ("Zug", "Nummer", "Block"),
}


@dataclass(frozen=True)
class Record:
    """One data row of a record file."""
    path: Path
    line: int
    fields: List[str]

    def malformed(self, message: str) -> MalformedRecordError:
        return MalformedRecordError(message, path=self.path, line=self.line)


def _is_skippable(row: List[str], skip_comments: bool) -> bool:
    if not skip_comments:
        return False
    if not any(field.strip() for field in row):
        return True
    return row[0].lstrip().startswith(COMMENT_PREFIX)


def read_records(path: Path, header: Sequence[str], config: BridgeConfig) -> List[Record]:
    """
    Read all data rows of a record file.

    Args:
        path: File to read
        header: Expected column names of the first row
        config: Delimiter, encoding and comment handling

    Returns:
        Data rows with whitespace-stripped fields, header excluded

    Raises:
        MissingTargetError: If the file does not exist
        MalformedRecordError: If the header is missing or wrong, or a row has
            the wrong number of fields
        IOFailureError: If the file cannot be opened
    """
    if not path.is_file():
        raise MissingTargetError("required file does not exist", path=path)

    records: List[Record] = []
    header_seen = False

    try:
        with open(path, "r", encoding=config.encoding, newline="") as f:
            reader = csv.reader(f, delimiter=config.delimiter)
            for row in reader:
                if _is_skippable(row, config.skip_comments):
                    continue

                fields = [field.strip() for field in row]
                if not header_seen:
                    if fields != list(header):
                        raise MalformedRecordError(
                            f"expected header {config.delimiter.join(header)!r}, "
                            f"got {config.delimiter.join(fields)!r}",
                            path=path,
                            line=reader.line_num,
                        )
                    header_seen = True
                    continue

                if len(fields) != len(header):
                    raise MalformedRecordError(
                        f"expected {len(header)} fields, got {len(fields)}",
                        path=path,
                        line=reader.line_num,
                    )
                records.append(Record(path=path, line=reader.line_num, fields=fields))
    except UnicodeDecodeError as exc:
        raise MalformedRecordError(f"cannot decode file as {config.encoding}: {exc}", path=path) from exc
    except csv.Error as exc:
        raise MalformedRecordError(str(exc), path=path) from exc
    except OSError as exc:
        raise IOFailureError(f"cannot open file for reading: {exc.strerror or exc}", path=path) from exc

    if not header_seen:
        raise MalformedRecordError("file is empty, header row missing", path=path)

    logger.debug("Read %d record(s) from %s", len(records), path)
    return records


def write_records(
    path: Path,
    header: Sequence[str],
    rows: Iterable[Sequence[object]],
    config: BridgeConfig,
) -> int:
    """
    Write a record file with its header row.

    The rows go to a ``.part`` file first which then replaces ``path``, so
    the target is never left half written.

    Returns:
        Number of data rows written

    Raises:
        IOFailureError: If the file cannot be written
    """
    part_path = path.with_name(path.name + ".part")
    count = 0

    try:
        with open(part_path, "w", encoding=config.encoding, newline="") as f:
            writer = csv.writer(f, delimiter=config.delimiter, lineterminator="\n")
            writer.writerow(header)
            for row in rows:
                writer.writerow(["" if value is None else str(value) for value in row])
                count += 1
        os.replace(part_path, path)
    except OSError as exc:
        part_path.unlink(missing_ok=True)
        raise IOFailureError(f"cannot write file: {exc.strerror or exc}", path=path) from exc

    logger.debug("Wrote %d record(s) to %s", count, path)
    return count
