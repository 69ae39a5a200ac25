"""Unit tests for the candidate grid and its topology."""

import pytest
import numpy as np
from sudoku_logic.core.board import SudokuBoard
from sudoku_logic.core.grid import CandidateGrid, RegionKind, get_topology


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


class TestTopology:
    """Tests for regions and intersections."""

    def test_region_counts(self):
        topology = get_topology(3)
        assert len(topology.regions) == 27
        assert [r.kind for r in topology.regions[:9]] == [RegionKind.ROW] * 9
        assert [r.kind for r in topology.regions[9:18]] == [RegionKind.COLUMN] * 9
        assert [r.kind for r in topology.regions[18:]] == [RegionKind.SQUARE] * 9

    def test_region_names(self):
        topology = get_topology(3)
        assert topology.regions[0].name == "Row A"
        assert topology.regions[9].name == "Column j"
        assert topology.regions[18].name == "Square Aj-Cl"
        assert topology.regions[26].name == "Square Gp-Ir"

    def test_box_cells_row_major(self):
        topology = get_topology(3)
        assert topology.regions[18 + 4].cells == (30, 31, 32, 39, 40, 41, 48, 49, 50)

    def test_intersections(self):
        topology = get_topology(3)
        assert len(topology.intersections) == 2 * 9 * 3
        for inter in topology.intersections:
            assert len(inter.box_side) == 6
            assert len(inter.line_side) == 6
            assert len(inter.overlap) == 3
            assert not set(inter.box_side) & set(inter.line_side)
            assert not set(inter.overlap) & (set(inter.box_side) | set(inter.line_side))

        first = topology.intersections[0]
        assert first.name == "Segment Aj-Al"
        assert first.overlap == (0, 1, 2)
        assert first.line_side == (3, 4, 5, 6, 7, 8)
        assert first.box_side == (9, 10, 11, 18, 19, 20)

    def test_cell_membership(self):
        topology = get_topology(3)
        for i in range(81):
            assert len(topology.cell_regions[i]) == 3
        # A cell lies on the outer side of 2 * (3 - 1) segments of its box
        # and of 2 * (3 - 1) segments of its row and column.
        assert all(len(x) == 8 for x in topology.cell_intersections)

    def test_topology_shared(self):
        assert get_topology(2) is get_topology(2)


class TestCandidateGrid:
    """Tests for CandidateGrid."""

    def test_init(self):
        grid = CandidateGrid.from_board(SudokuBoard.from_string(TEST_PUZZLE))
        assert grid.size == 9
        assert grid.cells[0] == 1 << 4
        assert grid.given[0]
        assert grid.cells[2] == 0x1ff
        assert not grid.given[2]
        assert grid.count_resolved() == 30
        assert all(grid.region_dirty)
        assert all(grid.intersection_dirty)

    def test_rejects_bad_values(self):
        values = np.zeros((9, 9), dtype=int)
        values[3, 3] = 10
        with pytest.raises(ValueError):
            CandidateGrid(values)

    def test_rejects_non_square(self):
        with pytest.raises(ValueError):
            CandidateGrid(np.zeros((9, 4), dtype=int))

    def test_clone_is_independent(self):
        grid = CandidateGrid.from_board(SudokuBoard.from_string(TEST_PUZZLE))
        grid.region_dirty = [False] * len(grid.region_dirty)
        twin = grid.clone()

        twin.cells[2] = 1
        twin.cell_changed(2)

        assert grid.cells[2] == 0x1ff
        assert not any(grid.region_dirty)
        assert twin.region_dirty[0] and twin.region_dirty[9 + 2] and twin.region_dirty[18]
        assert twin.id == grid.id
        assert twin.topology is grid.topology

    def test_cell_changed_reports_single(self):
        grid = CandidateGrid(np.zeros((4, 4), dtype=int))
        grid.cells[0] = 0b0011
        assert not grid.cell_changed(0)
        grid.cells[0] = 0b0010
        assert grid.cell_changed(0)
        assert grid.value_of(0) == 2

    def test_identifiers_increase(self):
        a = CandidateGrid(np.zeros((4, 4), dtype=int))
        b = CandidateGrid(np.zeros((4, 4), dtype=int))
        assert b.id > a.id

    def test_candidates_array(self):
        grid = CandidateGrid(np.zeros((4, 4), dtype=int))
        grid.cells[0] = 0b1010
        candidates = grid.candidates()
        assert candidates.shape == (4, 4, 4)
        assert candidates[0, 0].tolist() == [0, 2, 0, 4]
        assert candidates[0, 1].tolist() == [1, 2, 3, 4]

    def test_event(self):
        grid = CandidateGrid.from_board(SudokuBoard.from_string(TEST_PUZZLE))
        event = grid.event()
        assert event.grid_id == grid.id
        assert event.resolved == 30
        assert event.values()[0, 0] == 5
        assert event.values()[0, 2] == 0

    def test_to_board_round_trip(self):
        board = SudokuBoard.from_string(TEST_PUZZLE)
        assert CandidateGrid.from_board(board).to_board() == board


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
