"""
Domain models for an exam plan: modules, groups and the scheduling grid.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import pendulum
from pendulum import Date

from .block_codes import SLOTS_PER_DAY, WEEK_COUNT, BlockCoordinate, Weekday


class ExamType(str, Enum):
    """Exam form as encoded in the exams file."""
    WRITTEN = "K"  # Klausur
    ORAL = "P"  # mündliche Prüfung


@dataclass(eq=False)
class Module:
    """
    An examinable course unit.

    Modules are compared by identity; the plan guarantees unique numbers.
    """
    number: str
    name: str
    origin: str = ""
    exam_type: ExamType = ExamType.WRITTEN
    exam_duration: int = 2

    def __post_init__(self):
        self.exam_type = ExamType(self.exam_type)
        if self.exam_duration <= 0:
            raise ValueError(f"Exam duration must be positive, got {self.exam_duration}")

    def __str__(self) -> str:
        return f"{self.number} {self.name}"


@dataclass(eq=False)
class GroupModule:
    """A module required by a group together with its date preference rank."""
    module: Module
    preference: int = 0


@dataclass(eq=False)
class Group:
    """A cohort of students (Zug) taking a set of exams."""
    name: str
    selected: bool = True
    exams_per_day: int = 1
    modules: List[GroupModule] = field(default_factory=list)

    def __post_init__(self):
        if self.exams_per_day < 0:
            raise ValueError(f"Exams per day must not be negative, got {self.exams_per_day}")

    def link_for(self, module: Module) -> Optional[GroupModule]:
        """Get the link to a module, or None if the group does not take it."""
        for link in self.modules:
            if link.module is module:
                return link
        return None

    def add_module(self, module: Module, preference: int = 0) -> GroupModule:
        """Link a module to the group. Linking twice keeps the first link."""
        link = self.link_for(module)
        if link is None:
            link = GroupModule(module=module, preference=preference)
            self.modules.append(link)
        return link


def _as_date(value, name: str) -> Optional[Date]:
    if value is None or isinstance(value, Date):
        return value
    if isinstance(value, datetime.date):
        return pendulum.date(value.year, value.month, value.day)
    raise ValueError(f"Interval {name} must be a date, got {value!r}")


@dataclass
class ExamInterval:
    """
    Date range of the exams in one week.

    Invariant: start is not after end when both are known. Plain
    ``datetime.date`` and ``datetime.datetime`` values are converted to
    pendulum dates.
    """
    week: int
    start: Optional[Date] = None
    end: Optional[Date] = None

    def __post_init__(self):
        self.start = _as_date(self.start, "start")
        self.end = _as_date(self.end, "end")
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError(f"Interval start {self.start} must not be after end {self.end}")


@dataclass(eq=False)
class Timeslot:
    """One bookable cell of the grid holding the modules assigned to it."""
    coordinate: BlockCoordinate
    modules: List[Module] = field(default_factory=list)

    def add_module(self, module: Module) -> None:
        if not self.contains(module):
            self.modules.append(module)

    def remove_module(self, module: Module) -> None:
        self.modules = [m for m in self.modules if m is not module]

    def contains(self, module: Module) -> bool:
        return any(m is module for m in self.modules)


@dataclass(eq=False)
class Day:
    weekday: Weekday
    timeslots: List[Timeslot]


@dataclass(eq=False)
class Week:
    number: int
    days: List[Day]


@dataclass(eq=False)
class Plan:
    """
    The exam planning model for one scheduling run.

    Use ``Plan.create()`` to get a plan with the full empty grid.
    """
    weeks: List[Week]
    intervals: List[ExamInterval]
    modules: List[Module] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)

    def __post_init__(self):
        shape = [[len(day.timeslots) for day in week.days] for week in self.weeks]
        expected = [
            BlockCoordinate(week=week, weekday=weekday, slot=slot)
            for week in range(1, WEEK_COUNT + 1)
            for weekday in Weekday
            for slot in range(1, SLOTS_PER_DAY + 1)
        ]
        if (
            shape != [[SLOTS_PER_DAY] * len(Weekday)] * WEEK_COUNT
            or [timeslot.coordinate for timeslot in self.timeslots()] != expected
        ):
            raise ValueError(
                f"Plan grid must have {WEEK_COUNT} weeks of {len(Weekday)} days "
                f"with {SLOTS_PER_DAY} timeslots each, in grid order"
            )

    @classmethod
    def create(cls) -> "Plan":
        """Create an empty plan with 3 weeks of 6 days with 6 timeslots each."""
        weeks = [
            Week(
                number=week,
                days=[
                    Day(
                        weekday=weekday,
                        timeslots=[
                            Timeslot(coordinate=BlockCoordinate(week=week, weekday=weekday, slot=slot))
                            for slot in range(1, SLOTS_PER_DAY + 1)
                        ],
                    )
                    for weekday in Weekday
                ],
            )
            for week in range(1, WEEK_COUNT + 1)
        ]
        intervals = [ExamInterval(week=week) for week in range(1, WEEK_COUNT + 1)]
        return cls(weeks=weeks, intervals=intervals)

    def find_module(self, number: str) -> Optional[Module]:
        """Find a module by its number."""
        for module in self.modules:
            if module.number == number:
                return module
        return None

    def find_group(self, name: str) -> Optional[Group]:
        """Find a group by its name."""
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def add_module(self, module: Module) -> Module:
        """
        Register a module.

        Raises:
            ValueError: If a module with the same number already exists
        """
        if self.find_module(module.number) is not None:
            raise ValueError(f"Duplicate module number: {module.number}")
        self.modules.append(module)
        return module

    def add_group(self, group: Group) -> Group:
        """
        Register a group.

        Raises:
            ValueError: If a group with the same name already exists
        """
        if self.find_group(group.name) is not None:
            raise ValueError(f"Duplicate group name: {group.name}")
        self.groups.append(group)
        return group

    def interval_for(self, week: int) -> ExamInterval:
        """Get the exam interval of a week; an unknown week has no dates."""
        for interval in self.intervals:
            if interval.week == week:
                return interval
        return ExamInterval(week=week)

    def timeslot(self, coordinate: BlockCoordinate) -> Timeslot:
        """
        Get the timeslot at a grid coordinate.

        Raises:
            LookupError: If the grid has no timeslot at that coordinate
        """
        try:
            week = self.weeks[coordinate.week - 1]
            timeslot = week.days[coordinate.weekday].timeslots[coordinate.slot - 1]
        except IndexError:
            timeslot = None
        if timeslot is None or timeslot.coordinate != coordinate:
            raise LookupError(f"Plan has no timeslot at {coordinate}")
        return timeslot

    def timeslots(self) -> Iterator[Timeslot]:
        """Iterate all timeslots in grid order (week, day, slot)."""
        for week in self.weeks:
            for day in week.days:
                yield from day.timeslots

    def timeslots_of(self, module: Module) -> List[Timeslot]:
        """Get every timeslot the module is assigned to."""
        return [timeslot for timeslot in self.timeslots() if timeslot.contains(module)]

    def assignments(self) -> List[Tuple[Module, BlockCoordinate]]:
        """List every (module, coordinate) occurrence in grid order."""
        return [
            (module, timeslot.coordinate)
            for timeslot in self.timeslots()
            for module in timeslot.modules
        ]

    def is_scheduled(self) -> bool:
        """Check whether any timeslot holds a module."""
        return any(timeslot.modules for timeslot in self.timeslots())

    def unschedule(self, module: Module) -> None:
        """Remove the module from every timeslot."""
        for timeslot in self.timeslots():
            timeslot.remove_module(module)
