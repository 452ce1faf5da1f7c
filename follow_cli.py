#!/usr/bin/env python3
"""
Command-line entry point: follow the path on a map read from a file or stdin.

Usage:
    python follow_cli.py maps/map1.txt
    python follow_cli.py --show < maps/map3.txt
    python follow_cli.py --step maps/map_double_crossing.txt
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from map_parser import find_marker, read_map_file, read_map_stream, require_unique
from path_render import format_result, render_trace
from path_types import DEFAULT_END, DEFAULT_START, MarkerSet, PathError, RuleSet
from pathfollow import trace_map
from step_viewer import StepViewer

logger = logging.getLogger(__name__)


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the path follower."""
    parser = argparse.ArgumentParser(
        description="Follow the path on an ASCII map and print the letters and characters on it."
    )
    parser.add_argument('map', nargs='?', default='-',
                        help="Map file to read (default: stdin)")
    parser.add_argument('--start', type=str, default=DEFAULT_START,
                        help=f"Start marker character (default: {DEFAULT_START!r})")
    parser.add_argument('--end', type=str, default=DEFAULT_END,
                        help=f"End marker character (default: {DEFAULT_END!r})")
    parser.add_argument('--strict-forks', action='store_true',
                        help="Fail on forks instead of taking the first open direction")
    parser.add_argument('--unique-markers', action='store_true',
                        help="Fail if a marker appears more than once")
    parser.add_argument('--show', action='store_true',
                        help="Show the map with the path colored after the result")
    parser.add_argument('--step', action='store_true',
                        help="Step through the path interactively")
    parser.add_argument('--verbose', '-v', action='count', default=0,
                        help="Log progress (-v for info, -vv for every step)")
    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')


def _run_viewer(args: argparse.Namespace, markers: MarkerSet, rules: RuleSet) -> int:
    grid = read_map_stream(sys.stdin.buffer, markers) if args.map == '-' else read_map_file(args.map, markers)
    locate = require_unique if rules.require_unique_markers else find_marker
    viewer = StepViewer(grid, locate(grid, markers.start), locate(grid, markers.end), markers, rules)
    viewer.run()
    return 1 if viewer.error is not None else 0


def main(argv: list[str] | None = None) -> int:
    """Run the path follower. Returns the process exit status."""
    parser = _create_argument_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        markers = MarkerSet(start=args.start, end=args.end)
    except ValueError as e:
        parser.error(str(e))
    rules = RuleSet(strict_forks=args.strict_forks, require_unique_markers=args.unique_markers)

    try:
        if args.step:
            return _run_viewer(args, markers, rules)

        if args.map == '-':
            grid = read_map_stream(sys.stdin.buffer, markers)
        else:
            grid = read_map_file(args.map, markers)
        result = trace_map(grid, markers, rules)
    except OSError as e:
        logger.error("Cannot read map: %s", e)
        return 1
    except PathError as e:
        logger.error("%s", e)
        return 1

    print(format_result(result.letters, result.characters))

    if args.show:
        map_text = render_trace(result.grid, result.path, markers=markers)
        Console().print(Panel(Text.from_ansi(map_text), title="Path", border_style="green"))

    return 0


if __name__ == "__main__":
    sys.exit(main())
