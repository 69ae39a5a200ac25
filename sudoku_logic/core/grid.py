"""Candidate grid: cell bitsets with region and intersection views over them."""

from __future__ import annotations
import itertools
from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .bits import BitTables, get_tables, single_value
from .board import SudokuBoard, box_size_of, cell_name, column_names, row_names
from .events import GridEvent
from .validator import check_values


class RegionKind(IntEnum):
    ROW = 0
    COLUMN = 1
    SQUARE = 2


@dataclass(frozen=True)
class Region:
    """A row, column or box: the indices of its cells, in order."""
    kind: RegionKind
    index: int
    name: str
    cells: Tuple[int, ...]


@dataclass(frozen=True)
class Intersection:
    """
    Overlap of a box with a row or column.

    ``box_side`` holds the box cells outside the line and ``line_side`` the
    line cells outside the box. A value present in one side only must lie in
    the overlap, so it can be removed from the other side.
    """
    name: str
    overlap: Tuple[int, ...]
    box_side: Tuple[int, ...]
    line_side: Tuple[int, ...]


class Topology:
    """
    Fixed structure of a grid with boxes of ``box_size`` x ``box_size``:
    3N regions, 2*N*box_size intersections, and for every cell the regions
    and intersections it takes part in. Shared by all grids of a size.
    """

    def __init__(self, box_size: int):
        s = box_size
        n = s * s
        self.box_size = s
        self.size = n

        rows = row_names(n)
        cols = column_names(n)

        self.cell_names = [cell_name(n, i // n, i % n) for i in range(n * n)]

        self.regions: List[Region] = []
        for r in range(n):
            self.regions.append(Region(RegionKind.ROW, r, f"Row {rows[r]}",
                                       tuple(r * n + c for c in range(n))))
        for c in range(n):
            self.regions.append(Region(RegionKind.COLUMN, c, f"Column {cols[c]}",
                                       tuple(r * n + c for r in range(n))))
        for b in range(n):
            r0, c0 = s * (b // s), s * (b % s)
            self.regions.append(Region(
                RegionKind.SQUARE, b,
                f"Square {rows[r0]}{cols[c0]}-{rows[r0 + s - 1]}{cols[c0 + s - 1]}",
                tuple((r0 + k // s) * n + c0 + k % s for k in range(n)),
            ))

        self.intersections: List[Intersection] = []
        for r in range(n):
            for c0 in range(0, n, s):
                r0 = s * (r // s)
                self.intersections.append(Intersection(
                    name=f"Segment {rows[r]}{cols[c0]}-{rows[r]}{cols[c0 + s - 1]}",
                    overlap=tuple(r * n + c for c in range(c0, c0 + s)),
                    box_side=tuple(rr * n + c for rr in range(r0, r0 + s) if rr != r
                                   for c in range(c0, c0 + s)),
                    line_side=tuple(r * n + c for c in range(n) if not c0 <= c < c0 + s),
                ))
        for c in range(n):
            for r0 in range(0, n, s):
                c0 = s * (c // s)
                self.intersections.append(Intersection(
                    name=f"Segment {rows[r0]}{cols[c]}-{rows[r0 + s - 1]}{cols[c]}",
                    overlap=tuple(r * n + c for r in range(r0, r0 + s)),
                    box_side=tuple(r * n + cc for r in range(r0, r0 + s)
                                   for cc in range(c0, c0 + s) if cc != c),
                    line_side=tuple(r * n + c for r in range(n) if not r0 <= r < r0 + s),
                ))

        cell_regions: List[List[int]] = [[] for _ in range(n * n)]
        for ir, region in enumerate(self.regions):
            for i in region.cells:
                cell_regions[i].append(ir)

        cell_intersections: List[List[int]] = [[] for _ in range(n * n)]
        for ii, inter in enumerate(self.intersections):
            for i in inter.box_side + inter.line_side:
                cell_intersections[i].append(ii)

        self.cell_regions = [tuple(x) for x in cell_regions]
        self.cell_intersections = [tuple(x) for x in cell_intersections]

    def __repr__(self) -> str:
        return f"Topology(box_size={self.box_size})"


@lru_cache(maxsize=None)
def get_topology(box_size: int) -> Topology:
    return Topology(box_size)


_grid_ids = itertools.count(1)


def next_grid_id() -> int:
    """Process-wide identifier tying observer callbacks to a solve."""
    return next(_grid_ids)


class CandidateGrid:
    """
    N*N cells, each holding a bitset of its remaining candidates
    (bit v set means value v + 1 is still possible) and a ``given`` flag.

    Regions and intersections are index views into ``cells``; their dirty
    flags live on the grid so that every clone tracks its own.
    """

    def __init__(self, values: Sequence[Sequence[int]], box_size: Optional[int] = None):
        """
        Build a grid from an N x N array, 0 meaning empty.

        Raises:
            ValueError: if the array is not square or holds a value outside 0..N.
        """
        arr = np.asarray(values)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise ValueError(f"Grid must be square, got shape {arr.shape}")
        size = arr.shape[0]
        if box_size is None:
            box_size = box_size_of(size)
        if box_size * box_size != size or not check_values(arr, size):
            raise ValueError(f"Grid values must be 0-{size}")

        self.size = size
        self.box_size = box_size
        self.topology: Topology = get_topology(box_size)
        self.tables: BitTables = get_tables(size)

        flat = arr.flatten().tolist()
        self.cells: List[int] = [1 << (v - 1) if v else self.tables.full for v in flat]
        self.given: List[bool] = [bool(v) for v in flat]
        self.region_dirty: List[bool] = [True] * len(self.topology.regions)
        self.intersection_dirty: List[bool] = [True] * len(self.topology.intersections)
        self.id = next_grid_id()

    @classmethod
    def from_board(cls, board: SudokuBoard) -> CandidateGrid:
        return cls(board.grid, board.box_size)

    def clone(self) -> CandidateGrid:
        """
        Independent copy of the cell states and dirty flags. The topology is
        shared; the identifier is kept so events from a branch can be tied to
        the grid it came from.
        """
        twin = CandidateGrid.__new__(CandidateGrid)
        twin.size = self.size
        twin.box_size = self.box_size
        twin.topology = self.topology
        twin.tables = self.tables
        twin.cells = list(self.cells)
        twin.given = list(self.given)
        twin.region_dirty = list(self.region_dirty)
        twin.intersection_dirty = list(self.intersection_dirty)
        twin.id = self.id
        return twin

    def name(self, index: int) -> str:
        return self.topology.cell_names[index]

    def cell_changed(self, index: int) -> bool:
        """
        Mark every region and intersection containing the cell as dirty.

        Returns:
            True if the cell is now reduced to a single value.
        """
        for ir in self.topology.cell_regions[index]:
            self.region_dirty[ir] = True
        for ii in self.topology.cell_intersections[index]:
            self.intersection_dirty[ii] = True
        return bool(self.tables.nb_bits[self.cells[index]] == 1)

    def value_of(self, index: int) -> int:
        """Value of a resolved cell, 0 if it still has several candidates."""
        return single_value(self.cells[index])

    def count_resolved(self) -> int:
        nb_bits = self.tables.nb_bits
        return sum(1 for v in self.cells if nb_bits[v] == 1)

    def count_unresolved(self) -> int:
        return self.size * self.size - self.count_resolved()

    def is_resolved(self) -> bool:
        return self.count_resolved() == self.size * self.size

    def candidates(self) -> np.ndarray:
        """(N, N, N) array: [r, c, v] is v + 1 if that value is possible, else 0."""
        n = self.size
        bits = np.array(self.cells, dtype=np.int64).reshape(n, n, 1)
        shifts = np.arange(n, dtype=np.int64)
        return ((bits >> shifts) & 1) * (shifts + 1)

    def event(self) -> GridEvent:
        return GridEvent(grid_id=self.id, candidates=self.candidates(),
                         resolved=self.count_resolved())

    def to_board(self) -> SudokuBoard:
        values = np.array([single_value(v) for v in self.cells], dtype=np.int32)
        return SudokuBoard(self.size, values.reshape(self.size, self.size))

    def __repr__(self) -> str:
        return f"CandidateGrid(id={self.id}, size={self.size}, resolved={self.count_resolved()})"
