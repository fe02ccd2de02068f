"""
Shared fixtures: a valid plan and directories prepared like sp-automatisch leaves them.
"""

from pathlib import Path

import pendulum
import pytest

from spabridge.domain.models import ExamInterval, ExamType, Group, Module, Plan

RESULT_DIRECTORY = "SPA-ERGEBNIS-PP"


def build_valid_plan() -> Plan:
    """Plan with four modules (one of them EIT) and three groups."""
    plan = Plan.create()
    plan.intervals = [
        ExamInterval(week=1, start=pendulum.date(2024, 2, 5), end=pendulum.date(2024, 2, 10)),
        ExamInterval(week=2, start=pendulum.date(2024, 2, 12), end=pendulum.date(2024, 2, 17)),
        ExamInterval(week=3, start=pendulum.date(2024, 2, 19), end=pendulum.date(2024, 2, 24)),
    ]

    analysis = plan.add_module(Module(number="30.2342", name="Analysis", origin="BWL", exam_type=ExamType.WRITTEN, exam_duration=2))
    databases = plan.add_module(Module(number="30.2476", name="Datenbanken; Grundlagen", origin="INF", exam_type=ExamType.ORAL, exam_duration=1))
    programming = plan.add_module(Module(number="30.1000", name="Programmierung", origin="INF", exam_type=ExamType.WRITTEN, exam_duration=3))
    electrical = plan.add_module(Module(number="EIT.01", name="Elektrotechnik", origin="EIT", exam_type=ExamType.WRITTEN, exam_duration=2))

    bwl = plan.add_group(Group(name="BWL1", selected=True, exams_per_day=2))
    bwl.add_module(analysis, preference=1)
    bwl.add_module(databases, preference=2)

    inf = plan.add_group(Group(name="INF1", selected=True, exams_per_day=1))
    inf.add_module(databases, preference=0)
    inf.add_module(programming, preference=3)
    inf.add_module(electrical, preference=1)

    old = plan.add_group(Group(name="INF-ALT", selected=False, exams_per_day=1))
    old.add_module(programming, preference=5)

    return plan


def write_file(path: Path, *lines: str) -> Path:
    """Write lines to a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    return path


def write_results(directory: Path, planning_rows, group_rows) -> None:
    """Write both result files the way sp-automatisch does."""
    write_file(directory / RESULT_DIRECTORY / "SPA-planung-pruef.csv", "Nummer;Block", *planning_rows)
    write_file(directory / RESULT_DIRECTORY / "SPA-zuege-pruef.csv", "Zug;Nummer;Block", *group_rows)


def prepare_scheduled_directory(directory: Path) -> None:
    """Request files of the valid plan plus a matching schedule."""
    write_file(
        directory / "pruef-intervalle.csv",
        "Woche;Beginn;Ende",
        "1;05.02.2024;10.02.2024",
        "2;12.02.2024;17.02.2024",
        "3;19.02.2024;24.02.2024",
    )
    write_file(
        directory / "pruefungen.csv",
        "Nummer;Name;Form;Dauer",
        "30.2342;Analysis;K;2",
        '30.2476;"Datenbanken; Grundlagen";P;1',
        "30.1000;Programmierung;K;3",
    )
    write_file(
        directory / "zuege-pruef.csv",
        "Zug;ProTag;Nummer",
        "BWL1;2;30.2342",
        "BWL1;2;30.2476",
        "INF1;1;30.2476",
        "INF1;1;30.1000",
    )
    write_file(
        directory / "zuege-pruef-pref2.csv",
        "Zug;Nummer;Praeferenz",
        "BWL1;30.2342;1",
        "BWL1;30.2476;2",
        "INF1;30.2476;0",
        "INF1;30.1000;3",
        "INF-ALT;30.1000;5",
    )
    write_results(
        directory,
        ["30.2342;MI2_5", "30.2476;DI2_3", "30.1000;FR3_1"],
        [
            "BWL1;30.2342;MI2_5",
            "BWL1;30.2476;DI2_3",
            "INF1;30.2476;DI2_3",
            "INF1;30.1000;FR3_1",
        ],
    )


@pytest.fixture
def valid_plan() -> Plan:
    return build_valid_plan()


@pytest.fixture
def scheduled_directory(tmp_path: Path) -> Path:
    prepare_scheduled_directory(tmp_path)
    return tmp_path
