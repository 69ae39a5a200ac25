"""Dancing Links (DLX) solver: sudoku as an exact cover problem."""

from __future__ import annotations
import logging
from typing import List, Tuple

import numpy as np

from .base_solver import BaseSolver, Method, Scope
from ..core.bits import DIGITS
from ..core.board import SudokuBoard
from ..core.events import EventType, GridEvent
from ..core.grid import next_grid_id
from ..exact_cover import Universe

log = logging.getLogger(__name__)

SEP = "|"


def placement_name(row: int, col: int, value: int) -> str:
    """Subset name of a placement, 1-based: ``R3C7#5`` puts 5 in row 3, column 7."""
    return f"R{DIGITS[row - 1]}C{DIGITS[col - 1]}#{DIGITS[value - 1]}"


def parse_placement(name: str) -> Tuple[int, int, int]:
    """(row, col, value), 1-based, of a placement subset name."""
    return DIGITS.index(name[1]) + 1, DIGITS.index(name[3]) + 1, DIGITS.index(name[5]) + 1


def constraint_columns(size: int) -> List[str]:
    """
    The 4*N*N elements to cover: every cell filled once (``R{r}C{c}``),
    and every value once per row (``R{r}#{n}``), column (``C{c}#{n}``) and
    box (``B{b}#{n}``).
    """
    columns = []
    for i in range(1, size + 1):
        for j in range(1, size + 1):
            a, b = DIGITS[i - 1], DIGITS[j - 1]
            columns.extend([f"R{a}C{b}", f"R{a}#{b}", f"C{a}#{b}", f"B{a}#{b}"])
    return columns


def placement_elements(size: int, box_size: int, row: int, col: int, value: int) -> List[str]:
    """The four constraint columns covered by placing ``value`` at (row, col), 1-based."""
    box = box_size * ((row - 1) // box_size) + (col - 1) // box_size + 1
    r, c, n, b = DIGITS[row - 1], DIGITS[col - 1], DIGITS[value - 1], DIGITS[box - 1]
    return [f"R{r}C{c}", f"R{r}#{n}", f"C{c}#{n}", f"B{b}#{n}"]


def build_universe(size: int, box_size: int) -> Universe:
    """Exact cover matrix of an empty grid: one subset per cell and value."""
    universe = Universe(SEP.join(constraint_columns(size)), SEP)
    for row in range(1, size + 1):
        for col in range(1, size + 1):
            for value in range(1, size + 1):
                universe.define_subset(
                    placement_name(row, col, value),
                    SEP.join(placement_elements(size, box_size, row, col, value)),
                    SEP,
                )
    return universe


class DLXSolver(BaseSolver):
    """
    Dancing Links solver using Knuth's Algorithm X for Exact Cover.

    An N x N sudoku can be formulated as an exact cover problem:
    - Each cell must have exactly one value (N² constraints)
    - Each row must have each value exactly once (N² constraints)
    - Each column must have each value exactly once (N² constraints)
    - Each box must have each value exactly once (N² constraints)

    Total: 4N² constraints, N³ possibilities (N² cells x N values);
    324 and 729 for a 9x9 grid, 1024 and 4096 for 16x16.
    Givens are required in the solution before the search starts.
    """

    name = "Dancing Links (DLX)"
    method = Method.EXACT_COVER

    def _solve(self, board: SudokuBoard) -> List[SudokuBoard]:
        size = board.size
        grid_id = next_grid_id()
        solutions: List[SudokuBoard] = []

        universe = build_universe(size, board.box_size)

        def displayer(subsets: List[str]) -> None:
            grid = np.zeros((size, size), dtype=np.int32)
            for name in subsets:
                row, col, value = parse_placement(name)
                grid[row - 1, col - 1] = value
            solutions.append(SudokuBoard(size, grid))
            if self.session.wants(EventType.SOLVED):
                self.session.emit_grid(EventType.SOLVED, GridEvent.from_values(grid_id, grid))

        universe.set_displayer(displayer)

        if self.session.wants(EventType.INIT):
            self.session.emit_grid(EventType.INIT, GridEvent.from_values(grid_id, board.grid))

        for row, col in zip(*np.nonzero(board.grid)):
            name = placement_name(int(row) + 1, int(col) + 1, board.get(int(row), int(col)))
            if not universe.require_in_solution(name):
                log.debug("Given %s conflicts with an earlier given", name)
                self.session.emit_message(grid_id, "Grid is not valid.\n", 0)
                return solutions

        count = universe.search(1 if self.scope is Scope.FIRST else 0)
        self.stats.nodes_explored = universe.nodes_explored
        self.stats.backtracks = universe.backtracks

        if self.session.wants_messages:
            if not count:
                self.session.emit_message(grid_id, "Grid is not valid.\n", 0)
            self.session.emit_message(
                grid_id,
                f"{count} solution{'s' if count != 1 else ''} found.\n"
                "Solved using exact cover search method.\n",
                0,
            )
        return solutions
