"""Validation utilities for Sudoku grids and solutions."""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

import numpy as np

if TYPE_CHECKING:
    from .board import SudokuBoard


def check_values(grid: Sequence[Sequence[int]], size: int) -> bool:
    """
    Check that a raw grid is size x size and only holds the integers 0 to size.

    This is the input check run before any solving starts. Ragged rows,
    non-numeric entries and non-integral numbers all fail it.
    """
    try:
        raw = np.asarray(grid)
        arr = raw.astype(np.int64)
    except (TypeError, ValueError):
        return False
    if raw.shape != (size, size):
        return False
    # 1.5 would otherwise pass as 1
    if raw.dtype.kind not in "iub" and not np.array_equal(arr, raw):
        return False
    return bool(np.all((arr >= 0) & (arr <= size)))


def validate_solution(puzzle: SudokuBoard, solution: SudokuBoard) -> bool:
    """
    Validate that a solution correctly solves the puzzle.

    Args:
        puzzle: The original puzzle.
        solution: The proposed solution.

    Returns:
        True if the solution is complete, valid and matches the puzzle clues.
    """
    if puzzle.size != solution.size:
        return False

    clues = puzzle.grid != 0
    if not np.array_equal(puzzle.grid[clues], solution.grid[clues]):
        return False

    return solution.is_solved()
