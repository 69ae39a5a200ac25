"""Elimination solver: candidate exclusion rules with a hypothesis search fallback."""

from __future__ import annotations
import logging
from typing import List, Optional

from .base_solver import BaseSolver, Method, Scope, SolverStats
from .rules import INVALID, intersection_skim, region_skim, value_skim
from ..core.bits import bit_values, value_name, values_string
from ..core.board import SudokuBoard
from ..core.events import EventType
from ..core.grid import CandidateGrid

log = logging.getLogger(__name__)


class EliminationSolver(BaseSolver):
    """
    Solves a grid the way a person would, by eliminating candidates.

    Features:
    - Region rules (candidate and value exclusion over subsets of a row,
      column or box), row/column rules per value, box/line intersection rule
    - Dirty flags so that only regions and intersections touched since their
      last scan are rescanned
    - Hypotheses on the cell with the fewest candidates when the rules stall,
      each tried on a clone of the grid
    - Every deduction explained through the session's message listeners
    """

    name = "Elimination"
    method = Method.ELIMINATION

    def _solve(self, board: SudokuBoard) -> List[SudokuBoard]:
        grid = CandidateGrid.from_board(board)
        return self.solve_grid(grid, self.stats)

    def solve_grid(self, grid: CandidateGrid, stats: SolverStats) -> List[SudokuBoard]:
        """
        Solve a candidate grid, accumulating into ``stats``.

        Returns:
            The solutions found (at most one with ``Scope.FIRST``).
        """
        self._solutions: List[SudokuBoard] = []
        stats.trail = [None] * (grid.size * grid.size)

        if self.session.wants(EventType.INIT):
            self.session.emit_grid(EventType.INIT, grid.event())

        ret = self.search(grid, stats)

        if ret < 0:
            self.session.emit_message(grid.id, "Grid is not valid.\n", 0)
            stats.method = Method.NONE
        else:
            if self.session.wants_messages:
                self.session.emit_message(grid.id, stats.report(), 0)
            stats.method = Method.BACKTRACKING if stats.hypotheses else Method.ELIMINATION

        log.debug("Grid #%d: %d solution(s), %d rules, %d hypotheses",
                  grid.id, len(self._solutions), stats.rules, stats.hypotheses)
        return self._solutions

    def propagate(self, grid: CandidateGrid, stats: SolverStats) -> int:
        """
        Apply the rules until none of them makes progress.

        Regions come first; row/column rules only run when no region changed,
        and intersections only when neither did. Any progress restarts with
        the regions.

        Returns:
            The number of productive rounds, or ``INVALID`` on contradiction.
        """
        rounds = 0
        while True:
            skim = self._skim_regions(grid, stats)
            if skim == 0:
                skim = self._skim_values(grid, stats)
            if skim == 0:
                skim = self._skim_intersections(grid, stats)
            if skim < 0:
                return INVALID
            if skim == 0:
                return rounds
            rounds += 1

    def _changed(self, grid: CandidateGrid) -> None:
        if self.session.wants(EventType.CHANGE):
            self.session.emit_grid(EventType.CHANGE, grid.event())

    def _invalid(self, grid: CandidateGrid) -> int:
        self.session.emit_message(grid.id, "  => Invalid grid.\n", 1)
        return INVALID

    def _skim_regions(self, grid: CandidateGrid, stats: SolverStats) -> int:
        skimmed = 0
        for ir in range(len(grid.region_dirty)):
            if not grid.region_dirty[ir]:
                continue
            grid.region_dirty[ir] = False
            ret = region_skim(grid, ir, stats, self.session)
            if ret > 0:
                skimmed = max(skimmed, ret)
                self._changed(grid)
            elif ret < 0:
                return self._invalid(grid)
        return skimmed

    def _skim_values(self, grid: CandidateGrid, stats: SolverStats) -> int:
        # Not gated by dirty flags: this rule is indexed by value, not by region.
        skimmed = 0
        for value in range(1, grid.size + 1):
            ret = value_skim(grid, value, stats, self.session)
            if ret > 0:
                skimmed = max(skimmed, ret)
                self._changed(grid)
            elif ret < 0:
                return self._invalid(grid)
        return skimmed

    def _skim_intersections(self, grid: CandidateGrid, stats: SolverStats) -> int:
        skimmed = 0
        for ii in range(len(grid.intersection_dirty)):
            if not grid.intersection_dirty[ii]:
                continue
            grid.intersection_dirty[ii] = False
            ret = intersection_skim(grid, ii, stats, self.session)
            if ret > 0:
                skimmed += ret
                self._changed(grid)
            elif ret < 0:
                return self._invalid(grid)
        return skimmed

    @staticmethod
    def select_pivot(grid: CandidateGrid) -> Optional[int]:
        """
        First cell, in scan order, with the fewest candidates among those
        with at least two. None if every cell is resolved.
        """
        nb_bits = grid.tables.nb_bits
        pivot = None
        fewest = grid.size + 1
        for i, bits in enumerate(grid.cells):
            count = int(nb_bits[bits])
            if 2 <= count < fewest:
                pivot, fewest = i, count
                if count == 2:
                    break
        return pivot

    def search(self, grid: CandidateGrid, stats: SolverStats) -> int:
        """
        Propagate, then branch on a pivot cell if the rules stall.

        Returns:
            ``INVALID`` if no solution lies below this grid, otherwise the
            deepest backtracking depth of a successful branch (0 when solved
            without any hypothesis).
        """
        if self.propagate(grid, stats) < 0:
            return INVALID

        pivot = self.select_pivot(grid)
        if pivot is None:
            return self._solved(grid, stats)

        self._changed(grid)

        ret = INVALID
        unresolved = grid.count_unresolved()
        choices = grid.cells[pivot]
        name = grid.name(pivot)

        for value in bit_values(choices):
            clone = grid.clone()
            clone.cells[pivot] = 1 << (value - 1)
            resolved = clone.count_resolved()
            stats.log_step(resolved, f"{name}={value_name(value)}?")
            if self.session.wants_messages:
                self.session.emit_message(
                    grid.id,
                    f"  ??? Hypothesis: cell {name} = {value_name(value)} ? "
                    f"(out of {values_string(choices)}) [{resolved:2d}] ???\n",
                    1,
                )
            clone.cell_changed(pivot)

            stats.hypotheses += 1
            stats.backtracking_depth += 1
            log.debug("Hypothesis %s=%s at depth %d", name, value_name(value), stats.backtracking_depth)

            k = self.search(clone, stats)

            steps = unresolved - clone.count_unresolved()
            stats.backtracking_steps = max(stats.backtracking_steps, steps)

            if k >= 0:
                stats.backtracking_depth = k
                ret = k
                if self.scope is Scope.FIRST:
                    return k
            else:
                stats.backtracking_depth -= 1
                if self.session.wants_messages:
                    self.session.emit_message(
                        grid.id,
                        f"  %%% Incorrect guess: cell {name} = {value_name(value)} "
                        f"[{resolved:2d}] (after {steps} steps). %%%\n",
                        1,
                    )

        return ret

    def _solved(self, grid: CandidateGrid, stats: SolverStats) -> int:
        stats.solutions += 1
        self._solutions.append(grid.to_board())

        if self.session.wants_messages:
            s = grid.box_size
            text = f"Solved using elimination method (solution #{stats.solutions}).\n"
            for i, step in enumerate(stats.trail):
                if step:
                    text += step + ("\t" if (i + 1) % s else "\n")
            self.session.emit_message(grid.id, text + "\n", 0)

        if self.session.wants(EventType.SOLVED):
            self.session.emit_grid(EventType.SOLVED, grid.event())

        return stats.backtracking_depth
