"""Sudoku board representation for 4x4 up to 25x25 grids."""

from __future__ import annotations
import numpy as np
from typing import List, Tuple, Optional, Iterable

from .bits import DIGITS


# Characters accepted for an empty cell.
EMPTY_CODES = "0."

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

SUPPORTED_SIZES = (4, 9, 16, 25)


def value_names(size: int) -> str:
    """Characters naming the values 1..size."""
    return DIGITS[:size]


def row_names(size: int) -> str:
    return ALPHABET[:size].upper()


def column_names(size: int) -> str:
    """Column letters follow the row letters when they fit in the alphabet."""
    offset = size if size <= 9 else 0
    return ALPHABET[offset:offset + size].lower()


def cell_name(size: int, row: int, col: int) -> str:
    """Display name of a cell, e.g. ``Aj`` for the top-left cell of a 9x9 grid."""
    return row_names(size)[row] + column_names(size)[col]


def box_size_of(size: int) -> int:
    box_size = int(round(np.sqrt(size)))
    if box_size * box_size != size or size not in SUPPORTED_SIZES:
        raise ValueError(f"Size must be one of {SUPPORTED_SIZES}, got {size}")
    return box_size


class SudokuBoard:
    """
    A Sudoku board of configurable size.

    Values are stored in a numpy array, 0 meaning empty. Sizes 4, 9, 16
    and 25 are supported (boxes of 2x2 up to 5x5).
    """

    def __init__(self, size: int = 9, grid: Optional[np.ndarray] = None):
        """
        Initialize a Sudoku board.

        Args:
            size: Board size (4, 9, 16 or 25).
            grid: Optional initial grid. If None, creates an empty board.

        Raises:
            ValueError: if the size, the shape or any value is invalid.
        """
        self.size = size
        self.box_size = box_size_of(size)

        if grid is not None:
            grid = np.asarray(grid)
            if grid.shape != (size, size):
                raise ValueError(f"Grid shape must be ({size}, {size}), got {grid.shape}")
            if grid.size and (grid.min() < 0 or grid.max() > size):
                raise ValueError(f"Values must be 0-{size}")
            self.grid = grid.astype(np.int32)
        else:
            self.grid = np.zeros((size, size), dtype=np.int32)

    def copy(self) -> SudokuBoard:
        """Create a deep copy of the board."""
        new_board = SudokuBoard(self.size)
        new_board.grid = self.grid.copy()
        return new_board

    def get(self, row: int, col: int) -> int:
        """Get value at position (row, col). 0 means empty."""
        return int(self.grid[row, col])

    def set(self, row: int, col: int, value: int) -> None:
        """Set value at position (row, col). Use 0 to clear."""
        if value < 0 or value > self.size:
            raise ValueError(f"Value must be 0-{self.size}, got {value}")
        self.grid[row, col] = value

    def get_row(self, row: int) -> np.ndarray:
        return self.grid[row, :]

    def get_col(self, col: int) -> np.ndarray:
        return self.grid[:, col]

    def get_box(self, row: int, col: int) -> np.ndarray:
        """Get all values in the box containing (row, col)."""
        box_row = (row // self.box_size) * self.box_size
        box_col = (col // self.box_size) * self.box_size
        return self.grid[box_row:box_row + self.box_size,
                         box_col:box_col + self.box_size].flatten()

    def count_empty(self) -> int:
        return int(np.sum(self.grid == 0))

    def count_filled(self) -> int:
        return int(np.sum(self.grid != 0))

    def is_complete(self) -> bool:
        return self.count_empty() == 0

    def _units(self) -> Iterable[np.ndarray]:
        for i in range(self.size):
            yield self.get_row(i)
            yield self.get_col(i)
        for box_row in range(0, self.size, self.box_size):
            for box_col in range(0, self.size, self.box_size):
                yield self.get_box(box_row, box_col)

    def is_valid(self) -> bool:
        """
        Check that no row, column or box holds the same value twice.
        Does not check that the board is complete.
        """
        for unit in self._units():
            non_zero = unit[unit != 0]
            if len(non_zero) != len(np.unique(non_zero)):
                return False
        return True

    def is_solved(self) -> bool:
        """Check if the puzzle is completely and correctly solved."""
        return self.is_complete() and self.is_valid()

    def to_string(self) -> str:
        """
        Compact one-line representation: '.' for empty cells, value names
        (1-9, then a-p) otherwise.
        """
        names = value_names(self.size)
        return ''.join(names[v - 1] if v else '.' for v in self.grid.flatten().tolist())

    def to_list(self) -> List[List[int]]:
        return self.grid.tolist()

    @classmethod
    def parse(cls, text: Iterable[str], size: int = 9) -> Tuple[SudokuBoard, int]:
        """
        Read a board from free text.

        Value names (case-insensitive) fill cells, '0' or '.' leave a cell
        empty, and every other character is ignored. The first size*size cell
        characters are used.

        Returns:
            The board and the number of extra cell characters that were ignored.

        Raises:
            ValueError: if fewer than size*size cells are provided.
        """
        box_size_of(size)
        names = value_names(size)
        needed = size * size
        values: List[int] = []
        ignored = 0

        for c in text:
            c = c.lower()
            if c in EMPTY_CODES:
                value = 0
            elif c in names:
                value = names.index(c) + 1
            else:
                continue
            if len(values) < needed:
                values.append(value)
            else:
                ignored += 1

        if len(values) < needed:
            raise ValueError(
                f"Incomplete grid ({len(values)} values provided for initialization, "
                f"{needed} values needed.)"
            )

        grid = np.array(values, dtype=np.int32).reshape(size, size)
        return cls(size, grid), ignored

    @classmethod
    def from_string(cls, s: str, size: int = 9) -> SudokuBoard:
        """Create a board from a string, ignoring separators and extra cells."""
        board, _ = cls.parse(s, size)
        return board

    def __str__(self) -> str:
        """Pretty-print the board with row and column names."""
        names = value_names(self.size)
        cols = column_names(self.size)
        rows = row_names(self.size)

        lines = ['   ' + ''.join(
            f' {c}' + ('  ' if (j + 1) % self.box_size == 0 else '')
            for j, c in enumerate(cols)
        ).rstrip()]
        horizontal_sep = '  +' + ('-' * (self.box_size * 2 + 1) + '+') * self.box_size

        for i in range(self.size):
            if i % self.box_size == 0:
                lines.append(horizontal_sep)

            row_str = f'{rows[i]} |'
            for j in range(self.size):
                val = int(self.grid[i, j])
                row_str += f' {names[val - 1]}' if val else ' .'
                if (j + 1) % self.box_size == 0:
                    row_str += ' |'

            lines.append(row_str)

        lines.append(horizontal_sep)
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"SudokuBoard(size={self.size}, filled={self.count_filled()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SudokuBoard):
            return False
        return self.size == other.size and np.array_equal(self.grid, other.grid)

    def __hash__(self) -> int:
        return hash(self.to_string())
