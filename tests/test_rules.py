"""Unit tests for the deduction rules."""

import pytest
import numpy as np
from sudoku_logic.core.events import SolveSession
from sudoku_logic.core.grid import CandidateGrid
from sudoku_logic.solvers.base_solver import RuleKind, SolverStats
from sudoku_logic.solvers.rules import (
    INVALID, intersection_skim, region_skim, remove_candidates, value_skim
)

FULL = 0b1111


def empty_grid(size=4):
    return CandidateGrid(np.zeros((size, size), dtype=int))


def row_a(grid):
    return grid.cells[0:4]


class TestRemoveCandidates:
    """Tests for candidate removal."""

    def test_unchanged(self):
        grid = empty_grid()
        grid.cells[0] = 0b0011
        assert remove_candidates(grid, 0, 0b1100, SolverStats(), SolveSession()) == 0

    def test_forced_placement_logged(self):
        grid = empty_grid()
        stats = SolverStats()
        session = SolveSession()
        messages = []
        session.add_message_handler(messages.append)

        assert remove_candidates(grid, 3, 0b0111, stats, session) == 1
        assert grid.cells[3] == 0b1000
        assert stats.trail[0] == " 1. Ah=4"
        assert "Cell Ah must contain 4 [ 1]" in messages[0].text
        assert messages[0].verbosity == 1

    def test_empty_cell_is_invalid(self):
        grid = empty_grid()
        grid.cells[0] = 0b0001
        assert remove_candidates(grid, 0, 0b0001, SolverStats(), SolveSession()) == INVALID

    def test_removal_marks_regions_dirty(self):
        grid = empty_grid()
        grid.region_dirty = [False] * len(grid.region_dirty)
        remove_candidates(grid, 5, 0b0001, SolverStats(), SolveSession())
        dirty = [i for i, d in enumerate(grid.region_dirty) if d]
        # row B, column f, square Ae-Bf
        assert dirty == [1, 4 + 1, 8 + 0]


class TestRegionSkim:
    """Tests for candidate and value exclusion in a region."""

    def test_single_given_excluded_from_region(self):
        grid = CandidateGrid(np.array([[1, 0, 0, 0]] + [[0] * 4] * 3))
        stats = SolverStats()
        assert region_skim(grid, 0, stats, SolveSession()) == 1
        assert row_a(grid) == [0b0001, 0b1110, 0b1110, 0b1110]
        assert stats.rules_by_depth[RuleKind.CANDIDATE_EXCLUSION][1] >= 1

    def test_duplicate_givens_are_invalid(self):
        grid = CandidateGrid(np.array([[1, 1, 0, 0]] + [[0] * 4] * 3))
        assert region_skim(grid, 0, SolverStats(), SolveSession()) == INVALID

    def test_hidden_single(self):
        grid = empty_grid()
        grid.cells[0:4] = [0b0111, 0b0111, 0b0111, FULL]
        stats = SolverStats()
        assert region_skim(grid, 0, stats, SolveSession()) == 1
        assert grid.cells[3] == 0b1000
        assert stats.rule_count(RuleKind.VALUE_EXCLUSION) == 1

    def test_naked_pair(self):
        grid = empty_grid()
        grid.cells[0:4] = [0b0011, 0b0011, FULL, FULL]
        stats = SolverStats()
        assert region_skim(grid, 0, stats, SolveSession()) == 2
        assert row_a(grid) == [0b0011, 0b0011, 0b1100, 0b1100]
        assert stats.rules_by_depth[RuleKind.CANDIDATE_EXCLUSION][2] == 1

    def test_hidden_pair(self):
        grid = empty_grid()
        # values 3 and 4 only lie in the first two cells
        grid.cells[0:4] = [FULL, FULL, 0b0011, 0b0011]
        assert region_skim(grid, 0, SolverStats(), SolveSession()) == 2
        assert row_a(grid) == [0b1100, 0b1100, 0b0011, 0b0011]

    def test_naked_six_applied_as_hidden_triple(self):
        grid = CandidateGrid(np.zeros((9, 9), dtype=int))
        # six cells share values 1-6, so 7, 8 and 9 only lie in the last three
        grid.cells[0:6] = [0b000111111] * 6
        stats = SolverStats()

        assert region_skim(grid, 0, stats, SolveSession()) == 3
        assert grid.cells[6:9] == [0b111000000] * 3
        assert grid.cells[0:6] == [0b000111111] * 6
        assert stats.rules_by_depth[RuleKind.VALUE_EXCLUSION][3] == 1

    def test_too_few_values_is_invalid(self):
        grid = empty_grid()
        grid.cells[0:4] = [0b0001, 0b0001, FULL, FULL]
        assert region_skim(grid, 0, SolverStats(), SolveSession()) == INVALID

    def test_nothing_to_do(self):
        grid = empty_grid()
        assert region_skim(grid, 0, SolverStats(), SolveSession()) == 0
        assert row_a(grid) == [FULL] * 4

    def test_solved_region_short_cut(self):
        grid = CandidateGrid(np.array([[1, 2, 3, 4]] + [[0] * 4] * 3))
        stats = SolverStats()
        assert region_skim(grid, 0, stats, SolveSession()) == 0
        assert stats.rules == 0

    def test_shrinks_at_most_n_minus_k_cells(self):
        grid = empty_grid()
        grid.cells[0:4] = [0b0011, 0b0011, FULL, FULL]
        before = list(grid.cells)
        level = region_skim(grid, 0, SolverStats(), SolveSession())
        changed = [i for i in range(16) if grid.cells[i] != before[i]]
        assert len(changed) <= 4 - level
        # values are only ever removed
        assert all(grid.cells[i] & ~before[i] == 0 for i in range(16))

    def test_messages(self):
        grid = empty_grid()
        grid.cells[0:4] = [0b0011, 0b0011, FULL, FULL]
        session = SolveSession()
        messages = []
        session.add_message_handler(messages.append)
        region_skim(grid, 0, SolverStats(), session)
        texts = [m.text for m in messages if m.verbosity == 1]
        assert any("Row A: each one of the 2 cells [ Ae Af ]" in t for t in texts)


class TestValueSkim:
    """Tests for row/column exclusion of a value."""

    def test_row_confines_value_to_column(self):
        grid = empty_grid()
        # value 1 can only lie in column e of row A
        grid.cells[1:4] = [0b1110] * 3
        stats = SolverStats()
        assert value_skim(grid, 1, stats, SolveSession()) == 1
        assert [grid.cells[r * 4] for r in range(1, 4)] == [0b1110] * 3
        assert grid.cells[0] == FULL
        assert stats.rule_count(RuleKind.LINE_EXCLUSION) >= 1

    def test_two_rows_two_columns(self):
        grid = CandidateGrid(np.zeros((9, 9), dtype=int))
        # value 1 only in columns j and n of rows A and E (X-wing)
        for row in (0, 4):
            for col in range(9):
                if col not in (0, 4):
                    grid.cells[row * 9 + col] &= ~1
        assert value_skim(grid, 1, SolverStats(), SolveSession()) == 2
        for row in range(9):
            for col in (0, 4):
                expected = 1 if row in (0, 4) else 0
                assert grid.cells[row * 9 + col] & 1 == expected

    def test_value_nowhere_in_row_is_invalid(self):
        grid = empty_grid()
        grid.cells[0:4] = [0b1110] * 4
        assert value_skim(grid, 1, SolverStats(), SolveSession()) == INVALID


class TestIntersectionSkim:
    """Tests for box/line intersection exclusion."""

    def test_line_confines_value_to_box(self):
        grid = empty_grid()
        # value 1 is missing from row A outside the top-left box
        grid.cells[2] = grid.cells[3] = 0b1110
        stats = SolverStats()
        assert intersection_skim(grid, 0, stats, SolveSession()) == 1
        # so it cannot lie elsewhere in the box
        assert grid.cells[4] == grid.cells[5] == 0b1110
        assert stats.rules == 1
        assert stats.rules_by_depth[RuleKind.INTERSECTION_EXCLUSION][1] == 1

    def test_rule_counter_grows_by_values_removed(self):
        grid = empty_grid()
        grid.cells[2] = grid.cells[3] = 0b1100
        stats = SolverStats()
        assert intersection_skim(grid, 0, stats, SolveSession()) == 2
        assert stats.rules == 2

    def test_empty_cell_is_invalid(self):
        grid = empty_grid()
        grid.cells[2] = grid.cells[3] = 0b1110
        grid.cells[4] = 0b0001
        assert intersection_skim(grid, 0, SolverStats(), SolveSession()) == INVALID

    def test_balanced_sides(self):
        grid = empty_grid()
        assert intersection_skim(grid, 0, SolverStats(), SolveSession()) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
