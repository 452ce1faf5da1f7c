"""
Shared type definitions for the path follower.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Characters with a fixed meaning in every map
BLANK = " "
VERTICAL = "|"
HORIZONTAL = "-"
JUNCTION = "+"

DEFAULT_START = "@"
DEFAULT_END = "x"


def is_letter(char: str) -> bool:
    """Waypoint labels are the ASCII uppercase letters only."""
    return "A" <= char <= "Z"


class Direction(Enum):
    """Direction of travel, carrying its (row_delta, col_delta)."""

    NONE = (0, 0)  # Before the first step
    UP = (-1, 0)  # Decreasing row
    RIGHT = (0, 1)  # Increasing col
    DOWN = (1, 0)  # Increasing row
    LEFT = (0, -1)  # Decreasing col

    @property
    def row_delta(self) -> int:
        return self.value[0]

    @property
    def col_delta(self) -> int:
        return self.value[1]

    @classmethod
    def from_delta(cls, row_delta: int, col_delta: int) -> Direction:
        """
        Convert a move into a direction.

        A nonzero column delta always wins over the row delta, so a diagonal
        move (which tracing never produces) reads as horizontal.

        Raises:
            InvalidDirection: If both deltas are zero
        """
        if col_delta > 0:
            return cls.RIGHT
        if col_delta < 0:
            return cls.LEFT
        if row_delta > 0:
            return cls.DOWN
        if row_delta < 0:
            return cls.UP
        raise InvalidDirection("Invalid path direction: step does not move")


class CellKind(Enum):
    """Classification of a map character."""

    START = "start"
    END = "end"
    WAYPOINT = "waypoint"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    JUNCTION = "junction"
    BLANK = "blank"


# =============================================================================
# Map Types
# =============================================================================


@dataclass(frozen=True)
class Coordinate:
    """A cell position within a map."""

    row: int
    col: int

    def shifted(self, direction: Direction, distance: int = 1) -> Coordinate:
        return Coordinate(
            self.row + direction.row_delta * distance,
            self.col + direction.col_delta * distance,
        )

    def __str__(self) -> str:
        return f"[{self.row}, {self.col}]"


@dataclass(frozen=True)
class MarkerSet:
    """Characters marking the start and end of the path."""

    start: str = DEFAULT_START
    end: str = DEFAULT_END

    def __post_init__(self) -> None:
        for name, char in (("start", self.start), ("end", self.end)):
            if len(char) != 1:
                raise ValueError(f"{name} marker must be a single character, got {char!r}")
            if char in (BLANK, VERTICAL, HORIZONTAL, JUNCTION) or is_letter(char):
                raise ValueError(
                    f"Invalid {name} marker {char!r}\n"
                    f"  Markers cannot be blank, a connector ('|', '-', '+') or an uppercase letter"
                )
        if self.start == self.end:
            raise ValueError(f"start and end markers must differ, both are {self.start!r}")

    def classify(self, char: str) -> CellKind:
        """Classify a map character relative to these markers."""
        if char == self.start:
            return CellKind.START
        if char == self.end:
            return CellKind.END
        if char == VERTICAL:
            return CellKind.VERTICAL
        if char == HORIZONTAL:
            return CellKind.HORIZONTAL
        if char == JUNCTION:
            return CellKind.JUNCTION
        if is_letter(char):
            return CellKind.WAYPOINT
        return CellKind.BLANK


@dataclass(frozen=True)
class RuleSet:
    """Opt-in validations for pathological maps."""

    strict_forks: bool = False  # Fail when a step has several candidates and no momentum
    require_unique_markers: bool = False  # Fail when a marker occurs more than once


@dataclass(frozen=True)
class Grid:
    """A map of characters. Rows keep their own lengths."""

    rows: tuple[str, ...]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    def in_bounds(self, coord: Coordinate) -> bool:
        return 0 <= coord.row < len(self.rows) and 0 <= coord.col < len(self.rows[coord.row])

    def char_at(self, coord: Coordinate) -> str:
        """Character at coord, or blank for cells outside the map."""
        if not self.in_bounds(coord):
            return BLANK
        return self.rows[coord.row][coord.col]


Path = list[Coordinate]


# =============================================================================
# Errors
# =============================================================================


class PathError(ValueError):
    """A map that cannot be traced from start to end."""


class MarkerNotFound(PathError):
    def __init__(self, character: str) -> None:
        self.character = character
        super().__init__(f"Character {character!r} not found in map")


class DuplicateMarker(PathError):
    def __init__(self, character: str, count: int) -> None:
        self.character = character
        self.count = count
        super().__init__(
            f"Character {character!r} appears {count} times in map\n"
            f"  Start and end markers must each appear exactly once"
        )


class DeadEnd(PathError):
    def __init__(self, location: Coordinate, direction: Direction) -> None:
        self.location = location
        self.direction = direction
        super().__init__(
            f"No direction to follow\n"
            f"  Location: {location}\n"
            f"  Moving: {direction.name}"
        )


class InvalidDirection(PathError):
    pass


class InfinitePath(PathError):
    def __init__(self, location: Coordinate) -> None:
        self.location = location
        super().__init__(
            f"Infinite path detected\n"
            f"  Path keeps returning along already visited cells at {location}"
        )


class AmbiguousFork(PathError):
    def __init__(self, location: Coordinate, candidates: list[Coordinate]) -> None:
        self.location = location
        self.candidates = candidates
        super().__init__(
            f"Ambiguous fork\n"
            f"  Location: {location}\n"
            f"  Candidates: {', '.join(str(c) for c in candidates)}"
        )
