"""
Path following over ASCII maps.

Walks a map one cell at a time from the start marker to the end marker,
carrying the direction of travel. At every step:
  1. Candidate neighbors are collected (no diagonals, no reversing, no blanks)
  2. Candidates are filtered by the kind of the current cell, skipping over
     chains of crossing connectors
  3. Momentum wins: keep going straight if possible, else take the first
     candidate in row-major order
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from map_parser import find_marker, require_unique
from path_render import path_as_characters, path_as_letters
from path_types import (
    BLANK,
    HORIZONTAL,
    VERTICAL,
    AmbiguousFork,
    CellKind,
    Coordinate,
    DeadEnd,
    Direction,
    Grid,
    InfinitePath,
    MarkerSet,
    Path,
    RuleSet,
)

__all__ = ["PathTracer", "TraceResult", "follow_path", "trace_map"]

logger = logging.getLogger(__name__)

# Scan order when momentum does not decide: row above, same row left to right, row below
NEIGHBOR_ORDER = (Direction.UP, Direction.LEFT, Direction.RIGHT, Direction.DOWN)


def _adjacent(index1: int | None, index2: int | None) -> bool:
    """True if both path indexes exist and sit next to each other."""
    if index1 is None or index2 is None:
        return False
    return abs(index1 - index2) == 1


class PathTracer:
    """
    Step-by-step tracer for a single map.

    Usage:
        tracer = PathTracer(grid, start, end)
        while not tracer.finished:
            tracer.step()
        print(tracer.path)

    The path is append-only. Cells crossed while skipping a connector chain
    are appended before the step that lands past them, so the path may hold
    the same coordinate more than once.
    """

    def __init__(
        self,
        grid: Grid,
        start: Coordinate,
        end: Coordinate,
        markers: MarkerSet = MarkerSet(),
        rules: RuleSet = RuleSet(),
    ) -> None:
        self.grid = grid
        self.start = start
        self.end = end
        self.markers = markers
        self.rules = rules
        self.reset()

    def reset(self) -> None:
        """Return to the start marker with no direction and an empty trail."""
        self.current = self.start
        self.direction = Direction.NONE
        self.path: Path = []
        self.previous_step_index: int | None = None
        self._first_seen: dict[Coordinate, int] = {}
        self._append(self.start)

    @property
    def finished(self) -> bool:
        return self.current == self.end

    def _append(self, location: Coordinate) -> None:
        self._first_seen.setdefault(location, len(self.path))
        self.path.append(location)

    def _neighbors(self, base: Coordinate) -> list[Coordinate]:
        """Orthogonal neighbors of base that exist in the map, in scan order."""
        cells = (base.shifted(d) for d in NEIGHBOR_ORDER)
        return [c for c in cells if self.grid.in_bounds(c)]

    def _skip_crossing(self, neighbor: Coordinate, crossing: str, heading: Direction) -> Coordinate:
        """
        Walk over a chain of crossing connectors starting at neighbor.

        Every crossed cell is appended to the path. Returns the first cell past
        the chain, or neighbor itself if the chain runs off the map.
        """
        cell = neighbor
        while self.grid.char_at(cell) == crossing:
            self._append(cell)
            cell = cell.shifted(heading)
            if not self.grid.in_bounds(cell):
                return neighbor
        return cell

    def _candidates(self, base: Coordinate, preferred: Coordinate) -> tuple[Coordinate, list[Coordinate]]:
        """
        Collect the cells the path may continue to from base.

        Returns:
            (preferred, candidates) where preferred has moved past a skipped
            connector chain if the chain started at the preferred cell
        """
        behind = base.shifted(self.direction, -1)
        kind = self.markers.classify(self.grid.char_at(base))
        candidates: list[Coordinate] = []

        for neighbor in self._neighbors(base):
            if neighbor == behind:
                continue
            char = self.grid.char_at(neighbor)
            if char == BLANK:
                continue
            same_row = neighbor.row == base.row

            match kind:
                case CellKind.VERTICAL:
                    # Only up and down; '-' cells here are crossings
                    if same_row:
                        continue
                    heading = Direction.DOWN if self.direction is Direction.DOWN else Direction.UP
                    candidate = self._skip_crossing(neighbor, HORIZONTAL, heading)
                case CellKind.HORIZONTAL:
                    # Only left and right; '|' cells here are crossings
                    if not same_row:
                        continue
                    heading = Direction.RIGHT if self.direction is Direction.RIGHT else Direction.LEFT
                    candidate = self._skip_crossing(neighbor, VERTICAL, heading)
                case _:
                    # Perpendicular connectors must be entered through a junction
                    if same_row and char == VERTICAL:
                        continue
                    if not same_row and char == HORIZONTAL:
                        continue
                    candidate = neighbor

            if neighbor == preferred:
                preferred = candidate
            candidates.append(candidate)

        return preferred, candidates

    def _choose(self, base: Coordinate, preferred: Coordinate, candidates: list[Coordinate]) -> Coordinate:
        if self.direction is not Direction.NONE and preferred in candidates:
            return preferred
        if not candidates:
            raise DeadEnd(base, self.direction)
        if self.rules.strict_forks and len(candidates) > 1:
            raise AmbiguousFork(base, candidates)
        return candidates[0]

    def step(self) -> Coordinate:
        """
        Advance one step along the path.

        Returns:
            The coordinate moved to

        Raises:
            DeadEnd: If no neighbor continues the path
            AmbiguousFork: If strict forks are on and the step has no single choice
            InvalidDirection: If the chosen cell does not move
            InfinitePath: If the path oscillates over already visited cells
        """
        if self.finished:
            raise RuntimeError(f"Path already reached the end at {self.end}")

        base = self.current
        preferred, candidates = self._candidates(base, base.shifted(self.direction))
        chosen = self._choose(base, preferred, candidates)

        next_step_index = self._first_seen.get(chosen)
        self._append(chosen)
        direction = Direction.from_delta(chosen.row - base.row, chosen.col - base.col)

        if _adjacent(self.previous_step_index, next_step_index):
            raise InfinitePath(chosen)
        self.previous_step_index = next_step_index

        logger.debug(
            "step: %s %r -> %s %r moving %s",
            base,
            self.grid.char_at(base),
            chosen,
            self.grid.char_at(chosen),
            direction.name,
        )
        self.direction = direction
        self.current = chosen
        return chosen

    def run(self) -> Path:
        """Step until the end marker is reached and return the path."""
        while not self.finished:
            self.step()
        logger.info("follow_path: reached %s after %d cells", self.end, len(self.path))
        return self.path


def follow_path(
    grid: Grid,
    start: Coordinate,
    end: Coordinate,
    markers: MarkerSet = MarkerSet(),
    rules: RuleSet = RuleSet(),
) -> Path:
    """
    Follow the path on grid from start to end.

    Args:
        grid: The loaded map
        start: Location of the start marker
        end: Location of the end marker
        markers: Marker characters used by the map
        rules: Optional stricter validations

    Returns:
        Every coordinate visited, in order, starting with start and ending with end
    """
    return PathTracer(grid, start, end, markers, rules).run()


@dataclass(frozen=True)
class TraceResult:
    """Outcome of tracing a whole map."""

    grid: Grid
    start: Coordinate
    end: Coordinate
    path: tuple[Coordinate, ...]
    letters: str
    characters: str


def trace_map(grid: Grid, markers: MarkerSet = MarkerSet(), rules: RuleSet = RuleSet()) -> TraceResult:
    """Locate both markers, follow the path and render it."""
    locate = require_unique if rules.require_unique_markers else find_marker
    start = locate(grid, markers.start)
    end = locate(grid, markers.end)

    path = follow_path(grid, start, end, markers, rules)
    return TraceResult(
        grid=grid,
        start=start,
        end=end,
        path=tuple(path),
        letters=path_as_letters(grid, path),
        characters=path_as_characters(grid, path),
    )
