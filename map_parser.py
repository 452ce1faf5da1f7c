"""
Map loading utilities for the path follower.

Provides:
1. Normalization of raw text lines into a Grid (unknown characters become blank)
2. Marker lookup within a loaded Grid
"""

from __future__ import annotations

import io
import logging
from pathlib import Path as FilePath
from typing import BinaryIO, Iterable

from path_types import (
    BLANK,
    HORIZONTAL,
    JUNCTION,
    VERTICAL,
    Coordinate,
    DuplicateMarker,
    Grid,
    MarkerNotFound,
    MarkerSet,
    is_letter,
)

__all__ = [
    "count_marker",
    "find_marker",
    "load_map",
    "normalize_line",
    "parse_map",
    "read_map_file",
    "read_map_stream",
    "require_unique",
]

logger = logging.getLogger(__name__)


def normalize_line(line: str, markers: MarkerSet = MarkerSet()) -> str:
    """
    Replace every character the path follower does not understand with blank.

    Kept unchanged:
    - Uppercase letters A-Z (waypoints)
    - The start and end markers
    - Blank, '|', '-' and '+'

    Example:
        "@-a-#-x" -> "@- - -x"
    """
    valid = {markers.start, markers.end, BLANK, VERTICAL, HORIZONTAL, JUNCTION}
    return "".join(char if char in valid or is_letter(char) else BLANK for char in line)


def load_map(lines: Iterable[str], markers: MarkerSet = MarkerSet()) -> Grid:
    """
    Load a map from raw text lines.

    One trailing LF or CRLF is stripped; line order and per-line length are preserved
    (rows are not padded).

    Args:
        lines: Raw lines, e.g. an open text file
        markers: Start and end marker characters

    Returns:
        Grid with normalized rows
    """
    rows = tuple(normalize_line(line.removesuffix("\n").removesuffix("\r"), markers) for line in lines)
    grid = Grid(rows)
    logger.debug("load_map: %d rows, widest %d columns", grid.height, grid.width)
    return grid


def parse_map(text: str, markers: MarkerSet = MarkerSet()) -> Grid:
    """Load a map from a single multi-line string. Only LF separates rows."""
    return load_map(io.StringIO(text, newline="\n"), markers)


def read_map_file(path: str | FilePath, markers: MarkerSet = MarkerSet()) -> Grid:
    """Load a map from a UTF-8 text file. Undecodable bytes become blank."""
    with open(path, encoding="utf-8", errors="replace", newline="\n") as f:
        return load_map(f, markers)


def read_map_stream(stream: BinaryIO, markers: MarkerSet = MarkerSet()) -> Grid:
    """Load a map from a binary stream such as sys.stdin.buffer, decoded like read_map_file."""
    text = io.TextIOWrapper(stream, encoding="utf-8", errors="replace", newline="\n")
    try:
        return load_map(text, markers)
    finally:
        text.detach()


def find_marker(grid: Grid, character: str) -> Coordinate:
    """
    Find the first cell holding character, scanning rows then columns.

    Raises:
        MarkerNotFound: If no cell holds the character
    """
    for row_idx, row in enumerate(grid.rows):
        col_idx = row.find(character)
        if col_idx != -1:
            return Coordinate(row_idx, col_idx)
    raise MarkerNotFound(character)


def count_marker(grid: Grid, character: str) -> int:
    return sum(row.count(character) for row in grid.rows)


def require_unique(grid: Grid, character: str) -> Coordinate:
    """
    Find character and check that it occurs exactly once.

    Raises:
        MarkerNotFound: If no cell holds the character
        DuplicateMarker: If more than one cell holds it
    """
    location = find_marker(grid, character)
    count = count_marker(grid, character)
    if count > 1:
        raise DuplicateMarker(character, count)
    return location
