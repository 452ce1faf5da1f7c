"""
Interactive step-through viewer for path following.
Display a map and advance the tracer one cell at a time with keyboard commands.
"""

from __future__ import annotations

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from path_render import path_as_characters, path_as_letters, render_trace
from path_types import Coordinate, Grid, MarkerSet, PathError, RuleSet
from pathfollow import PathTracer


class StepViewer:
    """Interactive viewer stepping a PathTracer through a map."""

    def __init__(
        self,
        grid: Grid,
        start: Coordinate,
        end: Coordinate,
        markers: MarkerSet = MarkerSet(),
        rules: RuleSet = RuleSet(),
    ) -> None:
        self.grid = grid
        self.markers = markers
        self.tracer = PathTracer(grid, start, end, markers, rules)
        self.console = Console()
        self.error: PathError | None = None
        self.status_message = "Ready"

    @property
    def stopped(self) -> bool:
        """True once the end is reached or the trace failed."""
        return self.tracer.finished or self.error is not None

    def generate_display(self) -> Panel:
        """Generate the current display with map and status."""
        tracer = self.tracer
        map_text = render_trace(self.grid, tracer.path, highlight=tracer.current, markers=self.markers)

        status = Text()
        status.append("Position: ", style="bold")
        status.append(f"{tracer.current} {self.grid.char_at(tracer.current)!r}\n")
        status.append("Moving: ", style="bold")
        status.append(f"{tracer.direction.name}\n")
        status.append("Steps: ", style="bold")
        status.append(f"{len(tracer.path) - 1}\n\n")

        # Convert ANSI-colored map text to Rich Text
        status.append(Text.from_ansi(map_text))
        status.append("\n\n")
        status.append("Letters: ", style="bold")
        status.append(f"{path_as_letters(self.grid, tracer.path)}\n")
        status.append("Path as characters: ", style="bold")
        status.append(f"{path_as_characters(self.grid, tracer.path)}\n\n")

        status.append("Keys:\n", style="bold cyan")
        status.append("  N / Space - Next step\n")
        status.append("  F - Finish\n")
        status.append("  R - Reset to start\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message, style="red" if self.error else None)

        if self.error is not None:
            title, border = "Path Follow - Error", "red"
        elif tracer.finished:
            title, border = "Path Follow - Done", "blue"
        else:
            title, border = "Path Follow", "green"
        return Panel(status, title=title, border_style=border, width=80)

    def advance(self) -> None:
        """Take one step, recording failures in the status line."""
        if self.stopped:
            self.status_message = "Nothing to do, press R to start again"
            return
        try:
            location = self.tracer.step()
        except PathError as e:
            self.error = e
            self.status_message = f"✗ {str(e).splitlines()[0]}"
            return
        if self.tracer.finished:
            self.status_message = f"✓ Reached the end at {location}"
        else:
            self.status_message = f"Moved to {location}"

    def finish(self) -> None:
        """Step until the end is reached or the trace fails."""
        while not self.stopped:
            self.advance()

    def reset(self) -> None:
        """Restart the trace from the start marker."""
        self.tracer.reset()
        self.error = None
        self.status_message = "Back at the start"

    def run(self) -> None:
        """Run the viewer until the user quits."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey().lower()

                    if key == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key in ('n', ' '):
                        self.advance()
                    elif key == 'f':
                        self.finish()
                    elif key == 'r':
                        self.reset()
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())
