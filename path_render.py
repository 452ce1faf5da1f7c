"""
Rendering for traced paths.

Provides:
1. The two textual outputs of a trace: waypoint letters and the full character trail
2. Colored map rendering with the visited cells picked out, for terminal display
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import simple_chalk as chalk  # type: ignore[import-untyped]

from path_types import BLANK, HORIZONTAL, JUNCTION, VERTICAL, Coordinate, Grid, MarkerSet, is_letter

__all__ = ["format_result", "path_as_characters", "path_as_letters", "render_trace"]

logger = logging.getLogger(__name__)


def path_as_characters(grid: Grid, path: Iterable[Coordinate]) -> str:
    """Every character crossed, in order, including cells crossed twice."""
    return "".join(grid.char_at(location) for location in path)


def path_as_letters(grid: Grid, path: Iterable[Coordinate]) -> str:
    """
    Waypoint letters in the order first visited.

    A waypoint is reported once per coordinate: passing the same cell again
    adds nothing, while a second cell holding the same letter is reported.
    """
    letters: list[str] = []
    seen: set[Coordinate] = set()
    for location in path:
        char = grid.char_at(location)
        if is_letter(char) and location not in seen:
            letters.append(char)
            seen.add(location)
    return "".join(letters)


def format_result(letters: str, characters: str) -> str:
    return f"Letters {letters}\nPath as characters {characters}"


def render_trace(
    grid: Grid,
    path: Iterable[Coordinate],
    highlight: Coordinate | None = None,
    markers: MarkerSet = MarkerSet(),
) -> str:
    """
    Render the map with every visited cell colored.

    Args:
        grid: The map to render
        path: Visited coordinates
        highlight: Optional cell shown with a white background (e.g. the tracer position)
        markers: Marker characters, colored apart from connectors

    Returns:
        The map as ANSI-colored text, one line per row
    """
    visited = set(path)

    def colorize_for(char: str) -> Callable[[str], str]:
        if char == markers.start:
            return chalk.green
        if char == markers.end:
            return chalk.red
        if is_letter(char):
            return chalk.yellowBright
        if char in (VERTICAL, HORIZONTAL, JUNCTION):
            return chalk.cyan
        return lambda s: s

    lines: list[str] = []
    for r_idx, row in enumerate(grid.rows):
        line_parts: list[str] = []
        for c_idx, char in enumerate(row):
            location = Coordinate(r_idx, c_idx)
            if location == highlight:
                line_parts.append(chalk.bgWhite.black(char))
            elif location in visited and char != BLANK:
                line_parts.append(colorize_for(char)(char))
            else:
                line_parts.append(char)
        lines.append("".join(line_parts))

    logger.debug("render_trace: %d rows, %d visited cells", len(lines), len(visited))
    return "\n".join(lines)
