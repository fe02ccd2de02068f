"""
Tests for writing plans to the sp-automatisch request files.
"""

import datetime
import os

import pytest

from spabridge.adapters.plan_writer import PlanWriter
from spabridge.adapters.presence import PresenceChecker
from spabridge.adapters.working_directory import WorkingDirectory
from spabridge.config import BridgeConfig
from spabridge.domain.exceptions import ErrorKind
from spabridge.domain.models import ExamInterval, Group, Module

from conftest import write_file


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


class TestPlanWriter:
    """Tests for PlanWriter."""

    def test_write_plan_creates_files(self, tmp_path, valid_plan):
        """Test that the four request files are written."""
        directory = WorkingDirectory(tmp_path)

        result = PlanWriter(directory).write_plan(valid_plan)

        assert result
        assert PresenceChecker(directory).is_written()
        # Not scheduled, so no result file
        assert not (tmp_path / "SPA-ERGEBNIS-PP").exists()

    def test_write_plan_returns_failure_without_plan(self, tmp_path):
        """Test that no plan gives MISSING_TARGET and no files."""
        result = PlanWriter(WorkingDirectory(tmp_path)).write_plan(None)

        assert not result
        assert result.kind is ErrorKind.MISSING_TARGET
        assert list(tmp_path.iterdir()) == []

    def test_write_plan_detects_missing_directory(self, tmp_path, valid_plan):
        """Test that a missing directory is not created."""
        directory = WorkingDirectory(tmp_path / "doesnotexist")

        result = PlanWriter(directory).write_plan(valid_plan)

        assert result.kind is ErrorKind.MISSING_TARGET
        assert not PresenceChecker(directory).is_written()
        assert not (tmp_path / "doesnotexist").exists()

    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores permissions")
    def test_write_plan_detects_read_only_directory(self, tmp_path, valid_plan):
        """Test that a read-only directory gives IO_FAILURE."""
        tmp_path.chmod(0o500)
        try:
            result = PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)
        finally:
            tmp_path.chmod(0o700)

        assert result.kind is ErrorKind.IO_FAILURE
        assert list(tmp_path.iterdir()) == []

    def test_intervals_file(self, tmp_path, valid_plan):
        """Test the content of the intervals file."""
        PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert _lines(tmp_path / "pruef-intervalle.csv") == [
            "Woche;Beginn;Ende",
            "1;05.02.2024;10.02.2024",
            "2;12.02.2024;17.02.2024",
            "3;19.02.2024;24.02.2024",
        ]

    def test_intervals_without_dates_are_written_empty(self, tmp_path, valid_plan):
        """Test that weeks without interval get empty dates."""
        valid_plan.intervals = []

        PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert _lines(tmp_path / "pruef-intervalle.csv")[1:] == ["1;;", "2;;", "3;;"]

    def test_exams_file_skips_eit_modules(self, tmp_path, valid_plan):
        """EIT modules are planned elsewhere and must not be written."""
        PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert _lines(tmp_path / "pruefungen.csv") == [
            "Nummer;Name;Form;Dauer",
            "30.2342;Analysis;K;2",
            '30.2476;"Datenbanken; Grundlagen";P;1',
            "30.1000;Programmierung;K;3",
        ]
        for path in tmp_path.glob("*.csv"):
            assert "EIT.01" not in path.read_text(encoding="utf-8")

    def test_excluded_origins_are_configurable(self, tmp_path, valid_plan):
        """Test that the excluded origins come from the config."""
        config = BridgeConfig(excluded_origins=["INF"])

        PlanWriter(WorkingDirectory(tmp_path), config).write_plan(valid_plan)

        numbers = [line.split(";")[0] for line in _lines(tmp_path / "pruefungen.csv")[1:]]
        assert numbers == ["30.2342", "EIT.01"]

    def test_groups_exams_file_contains_selected_groups_only(self, tmp_path, valid_plan):
        """Test the content of the group exams file."""
        PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert _lines(tmp_path / "zuege-pruef.csv") == [
            "Zug;ProTag;Nummer",
            "BWL1;2;30.2342",
            "BWL1;2;30.2476",
            "INF1;1;30.2476",
            "INF1;1;30.1000",
        ]

    def test_groups_exams_pref_file(self, tmp_path, valid_plan):
        """Test that the preference file covers every group."""
        PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert _lines(tmp_path / "zuege-pruef-pref2.csv") == [
            "Zug;Nummer;Praeferenz",
            "BWL1;30.2342;1",
            "BWL1;30.2476;2",
            "INF1;30.2476;0",
            "INF1;30.1000;3",
            "INF-ALT;30.1000;5",
        ]

    def test_write_plan_writes_probably_correct_schedule_file(self, tmp_path, valid_plan):
        """Two scheduled modules give a header and two rows."""
        valid_plan.weeks[0].days[0].timeslots[0].add_module(valid_plan.modules[0])
        valid_plan.weeks[0].days[0].timeslots[1].add_module(valid_plan.modules[1])

        assert PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        lines = _lines(tmp_path / "SPA-ERGEBNIS-PP" / "SPA-planung-pruef.csv")
        assert len(lines) == 3
        assert lines == ["Nummer;Block", "30.2342;MO1_1", "30.2476;MO1_2"]
        assert not (tmp_path / "SPA-ERGEBNIS-PP" / "SPA-zuege-pruef.csv").exists()

    def test_schedule_file_lists_every_occurrence(self, tmp_path, valid_plan):
        """Test that a module in two timeslots gets two rows."""
        module = valid_plan.modules[0]
        valid_plan.weeks[2].days[5].timeslots[5].add_module(module)
        valid_plan.weeks[0].days[1].timeslots[0].add_module(module)

        PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        lines = _lines(tmp_path / "SPA-ERGEBNIS-PP" / "SPA-planung-pruef.csv")
        assert lines[1:] == ["30.2342;DI1_1", "30.2342;SA3_6"]

    def test_stale_result_files_are_removed(self, tmp_path, valid_plan):
        """An old schedule must not make a fresh plan look scheduled."""
        write_file(tmp_path / "SPA-ERGEBNIS-PP" / "SPA-planung-pruef.csv", "Nummer;Block", "X;MO1_1")
        write_file(tmp_path / "SPA-ERGEBNIS-PP" / "SPA-zuege-pruef.csv", "Zug;Nummer;Block")
        write_file(tmp_path / "notes.txt", "keep me")
        directory = WorkingDirectory(tmp_path)

        assert PlanWriter(directory).write_plan(valid_plan)

        assert not PresenceChecker(directory).is_scheduled()
        assert not (tmp_path / "SPA-ERGEBNIS-PP" / "SPA-planung-pruef.csv").exists()
        assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == "keep me\n"

    def test_no_part_files_are_left(self, tmp_path, valid_plan):
        """Test that temporary part files are replaced."""
        valid_plan.weeks[0].days[0].timeslots[0].add_module(valid_plan.modules[0])

        PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert list(tmp_path.rglob("*.part")) == []

    def test_comma_delimiter(self, tmp_path, valid_plan):
        """Test writing with a configured delimiter."""
        config = BridgeConfig(delimiter=",")

        PlanWriter(WorkingDirectory(tmp_path), config).write_plan(valid_plan)

        assert _lines(tmp_path / "pruefungen.csv")[2] == "30.2476,Datenbanken; Grundlagen,P,1"

    @pytest.mark.parametrize("number", ["", "#12", " 30.1", "30.1 "])
    def test_module_number_that_would_not_read_back_is_rejected(self, tmp_path, valid_plan, number):
        """Test that the write fails before touching files for such numbers."""
        valid_plan.add_module(Module(number=number, name="Statistik"))
        write_file(tmp_path / "pruefungen.csv", "Nummer;Name;Form;Dauer")

        result = PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert result.kind is ErrorKind.MALFORMED_RECORD
        assert result.path == tmp_path / "pruefungen.csv"
        assert repr(number) in result.message
        assert _lines(tmp_path / "pruefungen.csv") == ["Nummer;Name;Form;Dauer"]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["pruefungen.csv"]

    @pytest.mark.parametrize("name", ["", "#BWL2", "BWL2 "])
    def test_group_name_that_would_not_read_back_is_rejected(self, tmp_path, valid_plan, name):
        """Test that group names are checked like module numbers."""
        group = valid_plan.add_group(Group(name=name, selected=False))
        group.add_module(valid_plan.find_module("30.2342"))

        result = PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert result.kind is ErrorKind.MALFORMED_RECORD
        assert result.path == tmp_path / "zuege-pruef-pref2.csv"
        assert list(tmp_path.iterdir()) == []

    def test_excluded_module_number_is_not_checked(self, tmp_path, valid_plan):
        """Test that modules that are never written may carry any number."""
        valid_plan.add_module(Module(number="#EIT", name="Messtechnik", origin="EIT"))

        assert PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

    def test_comment_prefix_is_allowed_when_comments_are_read(self, tmp_path, valid_plan):
        """Test that '#' only matters while comment rows are skipped."""
        valid_plan.add_module(Module(number="#12", name="Statistik"))
        config = BridgeConfig(skip_comments=False)

        assert PlanWriter(WorkingDirectory(tmp_path), config).write_plan(valid_plan)

        assert _lines(tmp_path / "pruefungen.csv")[-1] == "#12;Statistik;K;2"

    def test_plain_interval_dates_are_written(self, tmp_path, valid_plan):
        """Test that intervals built from datetime.date values are formatted."""
        valid_plan.intervals[0] = ExamInterval(
            week=1, start=datetime.date(2024, 2, 5), end=datetime.date(2024, 2, 10)
        )

        assert PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert _lines(tmp_path / "pruef-intervalle.csv")[1] == "1;05.02.2024;10.02.2024"

    def test_failing_replace_is_io_failure(self, tmp_path, valid_plan, monkeypatch):
        """Test that a write failing partway reports IO_FAILURE and leaves no part file."""
        calls = []

        def fail_on_second_file(src, dst):
            calls.append(dst)
            if len(calls) == 2:
                raise OSError(28, "No space left on device")
            os.rename(src, dst)

        monkeypatch.setattr(os, "replace", fail_on_second_file)

        result = PlanWriter(WorkingDirectory(tmp_path)).write_plan(valid_plan)

        assert not result
        assert result.kind is ErrorKind.IO_FAILURE
        assert result.path == tmp_path / "pruefungen.csv"
        assert "No space left on device" in result.message
        assert list(tmp_path.rglob("*.part")) == []
        # The file written before the failure is kept
        assert (tmp_path / "pruef-intervalle.csv").is_file()
        assert not (tmp_path / "pruefungen.csv").exists()
