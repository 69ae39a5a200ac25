"""Single entry point: solve a grid with a given method, report through a session."""

from __future__ import annotations
import logging
from typing import Dict, Optional, Sequence, Type

import numpy as np

from .core.board import SUPPORTED_SIZES, SudokuBoard, box_size_of
from .core.events import SolveSession
from .core.validator import check_values
from .solvers import BacktrackingSolver, BaseSolver, DLXSolver, EliminationSolver, Method, Scope

log = logging.getLogger(__name__)


SOLVERS: Dict[Method, Type[BaseSolver]] = {
    Method.ELIMINATION: EliminationSolver,
    Method.BACKTRACKING: BacktrackingSolver,
    Method.EXACT_COVER: DLXSolver,
}


def get_solver(method: Method, scope: Scope = Scope.ALL,
               session: Optional[SolveSession] = None) -> BaseSolver:
    """
    Solver instance for a method.

    Raises:
        ValueError: for ``Method.NONE``.
    """
    if method not in SOLVERS:
        raise ValueError(f"No solver for method {method.value!r}")
    return SOLVERS[method](scope=scope, session=session)


def solve(grid: Sequence[Sequence[int]],
          method: Method = Method.ELIMINATION,
          scope: Scope = Scope.ALL,
          session: Optional[SolveSession] = None,
          box_size: Optional[int] = None) -> Method:
    """
    Solve an N x N grid of integers, 0 meaning empty.

    Solutions, deductions and grid states are reported to the listeners of
    ``session``; nothing is returned but the method that worked.

    Args:
        grid: The puzzle, values 0 to N.
        method: Solving method.
        scope: First solution only, or all of them.
        session: Listeners for grid events and messages.
        box_size: Side of a box; defaults to the square root of N.

    Returns:
        ``Method.NONE`` if the grid is malformed or has no solution;
        otherwise the method used, elimination being reported as
        ``Method.BACKTRACKING`` when a hypothesis was needed.
    """
    session = session if session is not None else SolveSession()

    try:
        arr = np.asarray(grid)
        size = arr.shape[0] if arr.ndim == 2 else 0
        if box_size is None:
            box_size = box_size_of(size)
        valid = (size in SUPPORTED_SIZES and box_size * box_size == size
                 and check_values(arr, size))
    except (TypeError, ValueError) as e:
        log.debug("Rejected grid: %s", e)
        valid = False
    if not valid:
        session.emit_message(0, "Grid is not valid.\n", 0)
        return Method.NONE

    board = SudokuBoard(size, arr.astype(np.int64))
    solver = get_solver(method, scope, session)
    solutions, stats = solver.solve(board)
    log.debug("%s: %d solution(s) in %.3fs", solver.name, len(solutions), stats.time_seconds)
    return stats.method if solutions else Method.NONE
