"""
Block codes used by sp-automatisch to address a timeslot in the exam grid.

A block code combines the German weekday abbreviation, the week number and
the slot number, e.g. ``MO1_1`` for Monday of week one, first slot.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, Optional

WEEK_COUNT = 3
SLOTS_PER_DAY = 6


class Weekday(IntEnum):
    """Exam days of a week. Sunday is never an exam day."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5

    @property
    def abbreviation(self) -> str:
        """Two-letter German abbreviation used in block codes."""
        return _ABBREVIATIONS[self]


_ABBREVIATIONS = {
    Weekday.MONDAY: "MO",
    Weekday.TUESDAY: "DI",
    Weekday.WEDNESDAY: "MI",
    Weekday.THURSDAY: "DO",
    Weekday.FRIDAY: "FR",
    Weekday.SATURDAY: "SA",
}


@dataclass(frozen=True)
class BlockCoordinate:
    """
    Position of a timeslot in the plan grid.

    Invariant: week in 1..3, slot in 1..6.
    """
    week: int
    weekday: Weekday
    slot: int

    def __post_init__(self):
        if not 1 <= self.week <= WEEK_COUNT:
            raise ValueError(f"Week must be between 1 and {WEEK_COUNT}, got {self.week}")
        if not 1 <= self.slot <= SLOTS_PER_DAY:
            raise ValueError(f"Slot must be between 1 and {SLOTS_PER_DAY}, got {self.slot}")
        # Accept plain ints for the weekday but always store the enum
        object.__setattr__(self, "weekday", Weekday(self.weekday))

    def __str__(self) -> str:
        return f"Woche {self.week}, {self.weekday.abbreviation}, Block {self.slot}"


class BlockCodeTable:
    """
    Fixed bijection between the 108 grid coordinates and their block codes.

    Built once; lookups never modify the table.
    """

    def __init__(self):
        codes: Dict[BlockCoordinate, str] = {}
        coordinates: Dict[str, BlockCoordinate] = {}

        for week in range(1, WEEK_COUNT + 1):
            for weekday in Weekday:
                for slot in range(1, SLOTS_PER_DAY + 1):
                    coordinate = BlockCoordinate(week=week, weekday=weekday, slot=slot)
                    code = f"{weekday.abbreviation}{week}_{slot}"
                    codes[coordinate] = code
                    coordinates[code] = coordinate

        expected = WEEK_COUNT * len(Weekday) * SLOTS_PER_DAY
        if len(codes) != expected or len(coordinates) != expected:
            raise RuntimeError(
                f"Block code table is not a bijection: {len(codes)} coordinates, "
                f"{len(coordinates)} codes, expected {expected}"
            )

        self._codes = codes
        self._coordinates = coordinates

    def code_for(self, week, weekday: Optional[Weekday] = None, slot: Optional[int] = None) -> str:
        """
        Get the block code of a coordinate.

        Accepts either a ``BlockCoordinate`` or ``week, weekday, slot``.

        Raises:
            ValueError: If the coordinate lies outside the grid
        """
        if isinstance(week, BlockCoordinate):
            coordinate = week
        else:
            coordinate = BlockCoordinate(week=week, weekday=weekday, slot=slot)
        return self._codes[coordinate]

    def coordinate_for(self, code: str) -> Optional[BlockCoordinate]:
        """Get the coordinate of a block code, or None if the code is unknown."""
        return self._coordinates.get(code)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code in self._coordinates

    def __iter__(self) -> Iterator[BlockCoordinate]:
        return iter(self._codes)

    def __len__(self) -> int:
        return len(self._codes)


BLOCK_CODES = BlockCodeTable()
