"""Unit tests for Sudoku board, parsing and validation."""

import pytest
import numpy as np
from sudoku_logic.core.board import SudokuBoard, cell_name, column_names, row_names
from sudoku_logic.core.validator import (
    check_values, validate_solution
)


TEST_PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

TEST_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


class TestSudokuBoard:
    """Tests for SudokuBoard class."""

    def test_create_empty_board(self):
        """Test creating an empty 9x9 board."""
        board = SudokuBoard()
        assert board.size == 9
        assert board.box_size == 3
        assert board.count_empty() == 81
        assert board.count_filled() == 0

    def test_create_16x16_board(self):
        """Test creating a 16x16 board."""
        board = SudokuBoard(size=16)
        assert board.size == 16
        assert board.box_size == 4

    def test_unsupported_size_rejected(self):
        with pytest.raises(ValueError):
            SudokuBoard(size=8)

    def test_value_out_of_range_rejected(self):
        """A 10 in a 9x9 grid is malformed input."""
        grid = np.zeros((9, 9), dtype=int)
        grid[0, 0] = 10
        with pytest.raises(ValueError):
            SudokuBoard(9, grid)

    def test_wrong_shape_rejected(self):
        with pytest.raises(ValueError):
            SudokuBoard(9, np.zeros((9, 8), dtype=int))

    def test_set_and_get(self):
        """Test setting and getting values."""
        board = SudokuBoard()
        board.set(0, 0, 5)
        assert board.get(0, 0) == 5

        board.set(0, 0, 0)
        assert board.count_empty() == 81

    def test_is_valid(self):
        """Test board validation."""
        board = SudokuBoard()
        assert board.is_valid()  # Empty board is valid

        board.set(0, 0, 5)
        board.set(0, 1, 5)  # Duplicate in row
        assert not board.is_valid()

    def test_is_solved(self):
        assert SudokuBoard.from_string(TEST_SOLUTION).is_solved()
        assert not SudokuBoard.from_string(TEST_PUZZLE).is_solved()

    def test_from_string(self):
        """Test creating board from string."""
        puzzle_str = "0" * 80 + "9"
        board = SudokuBoard.from_string(puzzle_str)
        assert board.get(8, 8) == 9

    def test_to_string(self):
        """Test converting board to string."""
        board = SudokuBoard()
        board.set(0, 0, 5)
        s = board.to_string()
        assert len(s) == 81
        assert s[0] == '5'
        assert s[1] == '.'

    def test_copy(self):
        """Test board copy."""
        board = SudokuBoard()
        board.set(4, 4, 7)
        copy = board.copy()

        assert copy.get(4, 4) == 7

        # Modify copy, original should be unchanged
        copy.set(4, 4, 8)
        assert board.get(4, 4) == 7

    def test_equality(self):
        a = SudokuBoard.from_string(TEST_PUZZLE)
        b = SudokuBoard.from_string(TEST_PUZZLE.replace("0", "."))
        assert a == b
        assert hash(a) == hash(b)

    def test_str_has_row_and_column_names(self):
        lines = str(SudokuBoard.from_string(TEST_PUZZLE)).splitlines()
        assert lines[0].split() == list("jklmnopqr")
        assert lines[2].startswith("A |")


class TestParse:
    """Tests for reading grids from free text."""

    def test_separators_ignored(self):
        board, ignored = SudokuBoard.parse("1234 4.2. .4.. 2..3", size=4)
        assert ignored == 0
        assert board.to_list() == [[1, 2, 3, 4], [4, 0, 2, 0], [0, 4, 0, 0], [2, 0, 0, 3]]

    def test_case_insensitive_value_names(self):
        text = "A" + "." * 255
        board, _ = SudokuBoard.parse(text, size=16)
        assert board.get(0, 0) == 10

    def test_extra_cells_counted(self):
        board, ignored = SudokuBoard.parse(TEST_PUZZLE + "123", size=9)
        assert ignored == 3
        assert board.to_string() == TEST_PUZZLE.replace("0", ".")

    def test_incomplete_grid(self):
        with pytest.raises(ValueError, match="Incomplete grid"):
            SudokuBoard.parse("123", size=9)

    def test_out_of_alphabet_characters_ignored(self):
        # 'a' is not a value name in a 9x9 grid
        board, _ = SudokuBoard.parse("a" + TEST_PUZZLE, size=9)
        assert board.get(0, 0) == 5


class TestNames:
    """Tests for the row, column and cell naming."""

    def test_9x9_names(self):
        assert row_names(9) == "ABCDEFGHI"
        assert column_names(9) == "jklmnopqr"
        assert cell_name(9, 0, 0) == "Aj"
        assert cell_name(9, 8, 8) == "Ir"

    def test_16x16_names(self):
        assert row_names(16) == "ABCDEFGHIJKLMNOP"
        assert column_names(16) == "abcdefghijklmnop"


class TestValidator:
    """Tests for validation utilities."""

    def test_check_values(self):
        assert check_values(np.zeros((9, 9), dtype=int), 9)
        assert not check_values(np.full((9, 9), 10), 9)
        assert not check_values(np.full((9, 9), -1), 9)
        assert not check_values(np.zeros((4, 4), dtype=int), 9)

    def test_check_values_rejects_non_integers(self):
        grid = [[0] * 4 for _ in range(4)]
        assert check_values(grid, 4)
        grid[1][2] = 1.5
        assert not check_values(grid, 4)
        grid[1][2] = 2.0
        assert check_values(grid, 4)
        grid[1][2] = "x"
        assert not check_values(grid, 4)
        assert not check_values([[0] * 4] * 3 + [[0] * 3], 4)

    def test_validate_solution(self):
        puzzle = SudokuBoard.from_string(TEST_PUZZLE)
        solution = SudokuBoard.from_string(TEST_SOLUTION)
        assert validate_solution(puzzle, solution)

        wrong = solution.copy()
        wrong.set(0, 0, 0)
        assert not validate_solution(puzzle, wrong)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
