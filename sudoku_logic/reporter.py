"""Console reporter: prints grids and rule messages from a solve session."""

from __future__ import annotations
from enum import Flag
from typing import Callable, Optional

from .core.board import column_names, row_names, value_names, box_size_of
from .core.events import EventType, GridEvent, Message, SolveSession


class Display(Flag):
    """What the reporter shows while solving."""
    NONE = 0
    GRIDS = 1
    RULES = 2
    CANDIDATES = 4


class ConsoleReporter:
    """
    Prints solved grids always, intermediate grids and rules on demand.

    Messages of verbosity 0 are always printed, up to verbosity 2 with
    ``Display.RULES``, and all of them with ``Display.CANDIDATES``.
    """

    def __init__(self, display: Display = Display.NONE, out: Callable[[str], None] = print):
        self.display = display
        self.out = out
        self._resolved: Optional[int] = None

    def attach(self, session: SolveSession) -> None:
        session.add_grid_handler(EventType.INIT | EventType.SOLVED, self.on_grid)
        if self.display & (Display.GRIDS | Display.CANDIDATES):
            session.add_grid_handler(EventType.CHANGE, self.on_grid)
        session.add_message_handler(self.on_message)

    def detach(self, session: SolveSession) -> None:
        session.remove_grid_handler(EventType.INIT | EventType.CHANGE | EventType.SOLVED, self.on_grid)
        session.remove_message_handler(self.on_message)

    def describe(self) -> str:
        shown = [d.name for d in (Display.GRIDS, Display.CANDIDATES, Display.RULES) if d & self.display]
        return "Display mode : " + (" ".join(shown) if shown else "NONE") + "."

    def on_message(self, message: Message) -> None:
        if (self.display & Display.CANDIDATES
                or (self.display & Display.RULES and message.verbosity <= 2)
                or message.verbosity <= 0):
            if message.grid_id:
                self.out(f"Grid #{message.grid_id}:")
            self.out(message.text.rstrip("\n"))

    def on_grid(self, event: GridEvent) -> None:
        complete = event.resolved == event.size * event.size
        if self.display == Display.RULES:
            self._resolved = event.resolved
            self.out(f"Grid #{event.grid_id}: [{event.resolved:2d}] " + self._one_line(event))
        elif self._resolved is not None and not complete and self.display & Display.CANDIDATES:
            self.out(self.format_candidates(event))
        elif (self._resolved is None or complete
              or (self.display & Display.GRIDS and event.resolved != self._resolved)):
            self._resolved = event.resolved
            self.out(self.format_grid(event))

    @staticmethod
    def _one_line(event: GridEvent) -> str:
        names = value_names(event.size)
        return "".join(names[v - 1] if v else "." for v in event.values().flatten().tolist())

    @staticmethod
    def format_grid(event: GridEvent) -> str:
        """Grid of resolved values, '.' for cells with several candidates."""
        n = event.size
        s = box_size_of(n)
        names = value_names(n)
        values = event.values()
        separator = "     +" + ("-" * (2 * s - 1) + "+") * s

        lines = [f"Grid #{event.grid_id}:",
                 f"[{event.resolved:3d}]" + "".join(f" {c}" for c in column_names(n))]
        for r, row_name in enumerate(row_names(n)):
            if r % s == 0:
                lines.append(separator)
            row = f"   {row_name} |"
            for c in range(n):
                v = int(values[r, c])
                row += names[v - 1] if v else "."
                row += "|" if (c + 1) % s == 0 else " "
            lines.append(row)
        lines.append(separator)
        return "\n".join(lines) + "\n"

    @staticmethod
    def format_candidates(event: GridEvent) -> str:
        """
        Every cell drawn as an s x s block of its candidates; a resolved cell
        shows its value alone, in the middle of the block.
        """
        n = event.size
        s = box_size_of(n)
        names = value_names(n)
        values = event.values()
        middle = (n + 1) // 2 - (0 if n % 2 else s // 2) - 1

        def rule(char: str) -> str:
            return "     +" + (char * s + "+") * n

        lines = [f"Grid #{event.grid_id}:",
                 f"[{event.resolved:3d}]" + "".join(
                     " " + " " * ((s - 1) // 2) + c + " " * (s - (s - 1) // 2 - 1)
                     for c in column_names(n))]
        for r, row_name in enumerate(row_names(n)):
            lines.append(rule("-" if r % s == 0 else "."))
            for k in range(s):
                line = f"   {row_name} |" if k == (s - 1) // 2 else "     |"
                for c in range(n):
                    for j in range(s):
                        v = k * s + j
                        if values[r, c]:
                            line += names[int(values[r, c]) - 1] if v == middle else " "
                        else:
                            line += names[v] if event.candidates[r, c, v] else " "
                    line += "|" if (c + 1) % s == 0 else ":"
                lines.append(line)
        lines.append(rule("-"))
        return "\n".join(lines) + "\n"
