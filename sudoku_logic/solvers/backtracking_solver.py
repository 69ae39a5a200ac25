"""Brute force backtracking solver."""

from __future__ import annotations
import logging
from typing import List, Optional

import numpy as np

from .base_solver import BaseSolver, Method, Scope
from ..core.board import SudokuBoard
from ..core.events import EventType, GridEvent
from ..core.grid import next_grid_id

log = logging.getLogger(__name__)


class BacktrackingSolver(BaseSolver):
    """
    Depth-first search over the integer grid.

    Features:
    - First empty cell in scan order, values tried in ascending order
    - Each try works on a copy of the grid, so nothing needs undoing
    - Counts tries (``stats.nodes_explored``) and dead ends (``stats.backtracks``)
    """

    name = "Backtracking"
    method = Method.BACKTRACKING

    def _solve(self, board: SudokuBoard) -> List[SudokuBoard]:
        self._solutions: List[SudokuBoard] = []
        self._grid_id = next_grid_id()
        self.stats.nodes_explored = 0
        self.stats.backtracks = 0

        if self.session.wants(EventType.INIT):
            self.session.emit_grid(EventType.INIT, GridEvent.from_values(self._grid_id, board.grid))

        if board.is_valid():
            size = board.size
            self._backtrack(board.grid.flatten().tolist(), 0, size, self._peers(board))

        if not self._solutions:
            self.session.emit_message(self._grid_id, "Grid is not valid.\n", 0)

        log.debug("Backtracking: %d solution(s), %d tries",
                  len(self._solutions), self.stats.nodes_explored)
        return self._solutions

    @staticmethod
    def _peers(board: SudokuBoard) -> List[List[int]]:
        """For every cell, the indices of the other cells of its row, column and box."""
        n, s = board.size, board.box_size
        peers = []
        for i in range(n * n):
            r, c = divmod(i, n)
            r0, c0 = s * (r // s), s * (c // s)
            linked = {r * n + k for k in range(n)}
            linked |= {k * n + c for k in range(n)}
            linked |= {(r0 + k // s) * n + c0 + k % s for k in range(n)}
            linked.discard(i)
            peers.append(sorted(linked))
        return peers

    def _next_empty(self, cells: List[int], start: int) -> Optional[int]:
        for i in range(start, len(cells)):
            if cells[i] == 0:
                return i
        return None

    def _backtrack(self, cells: List[int], start: int, size: int,
                   peers: List[List[int]]) -> bool:
        """
        Fill the empty cells from ``start`` on.

        Returns:
            True if the search must stop (first solution found with
            ``Scope.FIRST``).
        """
        index = self._next_empty(cells, start)
        if index is None:
            self._solved(cells, size)
            return self.scope is Scope.FIRST

        used = {cells[p] for p in peers[index]}
        found = False
        for value in range(1, size + 1):
            if value in used:
                continue
            self.stats.nodes_explored += 1
            clone = list(cells)
            clone[index] = value
            found = True
            if self._backtrack(clone, index + 1, size, peers):
                return True

        if not found:
            self.stats.backtracks += 1
        return False

    def _solved(self, cells: List[int], size: int) -> None:
        grid = np.array(cells, dtype=np.int32).reshape(size, size)
        solution = SudokuBoard(size, grid)
        self._solutions.append(solution)

        if self.session.wants_messages:
            self.session.emit_message(
                self._grid_id,
                f"Solved using backtracking method (solution #{len(self._solutions)}, "
                f"{self.stats.nodes_explored} tries).\n",
                0,
            )
        if self.session.wants(EventType.SOLVED):
            self.session.emit_grid(EventType.SOLVED, GridEvent.from_values(self._grid_id, grid))
