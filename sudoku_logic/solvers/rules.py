"""
Deduction rules of the elimination method.

Each rule works on the candidate bitsets of a ``CandidateGrid`` and returns
the highest skim level it reached (the size of the subset that fired), 0 if
it removed nothing, or ``INVALID`` if the grid turned out to be contradictory.

Subsets are visited by increasing size. A rule firing on a single cell or
value finishes the subsets of size 1 and stops there; a rule firing on a
larger subset returns at once.

The region rules generalise the "chain exclusion" and "pile exclusion" rules
described by Suchard, Yatom and Shapir (Sudoku & Graph Theory, Dr. Dobb's
Journal, 2006): k cells sharing exactly k candidates, and k values confined
to exactly k cells. The row/column rule is the same reasoning with rows and
columns in place of cells and values, for one value at a time.
"""

from __future__ import annotations
from typing import Callable, List, Sequence, Tuple

import numpy as np

from ..core.bits import (
    bit_values, gather_unions, get_tables, single_value, spread, value_name, values_string,
)
from ..core.board import column_names, row_names
from ..core.events import SolveSession
from ..core.grid import CandidateGrid
from .base_solver import RuleKind, SolverStats


INVALID = -1


def remove_candidates(grid: CandidateGrid, index: int, mask: int,
                      stats: SolverStats, session: SolveSession) -> int:
    """
    Remove the values of ``mask`` from a cell.

    A cell left with a single value is logged in the statistics trail and
    announced.

    Returns:
        0 if the cell did not change, 1 if it did, ``INVALID`` if it has no
        candidate left.
    """
    old = grid.cells[index]
    new = old & ~mask
    if new == old:
        return 0

    grid.cells[index] = new
    if grid.cell_changed(index):
        resolved = grid.count_resolved()
        value = value_name(single_value(new))
        stats.log_step(resolved, f"{grid.name(index)}={value}")
        if session.wants_messages:
            session.emit_message(
                grid.id,
                f"\n  ### Cell {grid.name(index)} must contain {value} [{resolved:2d}] ###\n\n",
                1,
            )

    if new == 0:
        return INVALID
    return 1


def _names(grid: CandidateGrid, cells: Tuple[int, ...], positions: int) -> str:
    return " ".join(grid.name(cells[p - 1]) for p in bit_values(positions))


def _first_hit(subsets: np.ndarray, hit: np.ndarray, after: int) -> int:
    hit &= subsets > after
    if not hit.any():
        return -1
    return int(subsets[np.argmax(hit)])


def _first_event(masks: Sequence[int], holders: Sequence[int],
                 open_pos: List[int], open_bits: List[int],
                 depth: int, after: int, nb_bits: np.ndarray) -> int:
    """
    Smallest subset of ``depth`` unresolved elements, or of ``depth``
    unresolved values, greater than ``after``, on which a rule acts.
    -1 if there is none.

    Elements: their masks hold fewer than ``depth`` values, or exactly
    ``depth`` values some other element also holds. Values: held by fewer
    than ``depth`` elements, or by exactly ``depth`` elements holding
    other values too.
    """
    first = -1

    if depth <= len(open_pos):
        local = get_tables(len(open_pos)).of_size(depth)
        inside = [masks[p] for p in open_pos]
        held = gather_unions(local, inside)
        outside = gather_unions(local ^ ((1 << len(open_pos)) - 1), inside)
        count = nb_bits[held]
        hit = (count < depth) | ((count == depth) & ((held & outside) != 0))
        first = _first_hit(spread(local, open_pos), hit, after)

    if depth <= len(open_bits):
        local = get_tables(len(open_bits)).of_size(depth)
        subsets = spread(local, open_bits)
        cells = gather_unions(local, [holders[v] for v in open_bits])
        count = nb_bits[cells]
        others = gather_unions(cells, masks) & ~subsets
        hit = (count < depth) | ((count == depth) & (others != 0))
        found = _first_hit(subsets, hit, after)
        if found >= 0 and (first < 0 or found < first):
            first = found

    return first


def _skim_subsets(n: int, nb_bits: np.ndarray,
                  current: Callable[[], List[int]],
                  check: Callable[[int, int], int]) -> int:
    """
    Run ``check(bits, depth)`` on the subsets of ``n`` elements, by size
    then numeric order, until it reports a contradiction or progress on a
    subset of more than one element.

    ``current()`` gives the mask of every element (bit ``v`` set when the
    element may take value ``v``). ``check`` returns ``INVALID``, 0, or
    ``depth`` when it removed candidates.

    Every single element is checked. Once those are settled, resolved
    elements and values cannot take part in a larger subset that acts, so
    only unresolved ones are searched, and all candidate subsets of one
    size are tested at once. With ``u`` unresolved elements and values, a
    subset of ``k`` elements acts exactly when the complementary ``u - k``
    values do, so sizes past half of ``u`` are never reached first.
    """
    stop = 0
    for p in range(n):
        ret = check(1 << p, 1)
        if ret < 0:
            return INVALID
        stop = stop or ret
    if stop:
        return stop

    masks = current()
    holders = [sum(1 << p for p in range(n) if masks[p] >> v & 1) for v in range(n)]
    open_pos = [p for p in range(n) if nb_bits[masks[p]] > 1]
    open_bits = [v for v in range(n) if nb_bits[holders[v]] > 1]
    u, w = len(open_pos), len(open_bits)
    last = (u + 1) // 2 if u == w else max(u, w)

    for depth in range(2, last + 1):
        after = -1
        while True:
            bits = _first_event(masks, holders, open_pos, open_bits, depth, after, nb_bits)
            if bits < 0:
                break
            ret = check(bits, depth)
            if ret:
                return ret
            after = bits

    return 0


def region_skim(grid: CandidateGrid, region_index: int,
                stats: SolverStats, session: SolveSession) -> int:
    """
    Apply candidate exclusion and value exclusion to one region.

    Candidate exclusion: if the k cells of a subset hold exactly k values
    between them, no other cell of the region can hold those values (fewer
    than k values is a contradiction).

    Value exclusion: if k values can only lie in k cells, those cells cannot
    hold any other value (fewer than k cells is a contradiction).
    """
    region = grid.topology.regions[region_index]
    cells = region.cells
    tables = grid.tables
    nb_bits = tables.nb_bits
    n = grid.size

    # A region of distinct single values cannot change nor be contradictory.
    current = [grid.cells[i] for i in cells]
    if all(nb_bits[v] == 1 for v in current):
        union = 0
        for v in current:
            union |= v
        if union == tables.full:
            return 0

    def check(bits: int, depth: int) -> int:
        fired = 0

        # candidate exclusion: 'bits' is a subset of cell positions
        values = 0
        for p in bit_values(bits):
            values |= grid.cells[cells[p - 1]]
        if nb_bits[values] < depth:
            return INVALID
        if nb_bits[values] == depth:
            skim_level = 0
            for p in range(n):
                if bits >> p & 1:
                    continue
                ret = remove_candidates(grid, cells[p], values, stats, session)
                if ret:
                    skim_level = depth
                    if ret < 0:
                        return INVALID
            if skim_level:
                if session.wants_messages:
                    _candidate_exclusion_message(grid, region, bits, values, session)
                stats.record_rule(RuleKind.CANDIDATE_EXCLUSION, skim_level)
                if skim_level > 1:
                    return skim_level
                fired = skim_level

        # value exclusion: 'bits' is a subset of values
        holders = 0
        for p in range(n):
            if grid.cells[cells[p]] & bits:
                holders |= 1 << p
        if depth > nb_bits[holders]:
            return INVALID
        if depth == nb_bits[holders]:
            others = tables.full & ~bits
            skim_level = 0
            for p in range(n):
                if not holders >> p & 1:
                    continue
                ret = remove_candidates(grid, cells[p], others, stats, session)
                if ret:
                    skim_level = depth
                    if ret < 0:
                        return INVALID
            if skim_level:
                if session.wants_messages:
                    _value_exclusion_message(grid, region, bits, holders, session)
                stats.record_rule(RuleKind.VALUE_EXCLUSION, skim_level)
                return skim_level

        return fired

    return _skim_subsets(n, nb_bits, lambda: [grid.cells[i] for i in cells], check)


def _candidate_exclusion_message(grid, region, bits, values, session) -> None:
    names = _names(grid, region.cells, bits)
    count = int(grid.tables.nb_bits[bits])
    if count > 1:
        session.emit_message(
            grid.id,
            f"{region.name}: each one of the {count} cells [ {names} ] can only accept "
            f"one of the {count} values ({values_string(values)}).\n"
            f"-> {region.name}: each one of the {count} values ({values_string(values)}) "
            f"can only lie in one of the {count} cells [ {names} ].\n",
            1,
        )
    elif not any(grid.given[region.cells[p - 1]] for p in bit_values(bits)):
        session.emit_message(
            grid.id,
            f"{region.name}: the cell [ {names} ] can only accept the value ({values_string(values)}).\n"
            f"-> {region.name}: the value ({values_string(values)}) can only lie in the cell [ {names} ].\n",
            3,
        )


def _value_exclusion_message(grid, region, bits, holders, session) -> None:
    names = _names(grid, region.cells, holders)
    count = int(grid.tables.nb_bits[bits])
    if count > 1:
        session.emit_message(
            grid.id,
            f"{region.name}: each one of the {count} values ({values_string(bits)}) can only lie "
            f"in one of the {count} cells [ {names} ].\n"
            f"-> {region.name}: each one of the {count} cells [ {names} ] can only accept "
            f"one of the {count} values ({values_string(bits)}).\n",
            1,
        )
    elif not any(grid.given[region.cells[p - 1]] for p in bit_values(holders)):
        session.emit_message(
            grid.id,
            f"{region.name}: the value ({values_string(bits)}) can only lie in the cell [ {names} ].\n"
            f"-> {region.name}: the cell [ {names} ] can only accept the value ({values_string(bits)}).\n",
            2,
        )


def value_skim(grid: CandidateGrid, value: int,
               stats: SolverStats, session: SolveSession) -> int:
    """
    Apply row/column exclusion for one value.

    If the value can only lie in k columns within k rows, it cannot lie in
    those columns in any other row (fewer than k columns is a contradiction).
    The same holds with rows and columns swapped.
    """
    nb_bits = grid.tables.nb_bits
    n = grid.size
    bit = 1 << (value - 1)

    def cell_index(line: int, cross: int, transposed: bool) -> int:
        # 'line' is 0-based, 'cross' 1-based
        if transposed:
            return (cross - 1) * n + line
        return line * n + cross - 1

    def check(bits: int, depth: int) -> int:
        fired = 0
        for transposed in (False, True):
            # columns holding the value in the rows of 'bits', or rows in its columns
            lines = 0
            for line in bit_values(bits):
                for cross in range(n):
                    if grid.cells[cell_index(line - 1, cross + 1, transposed)] & bit:
                        lines |= 1 << cross
            if nb_bits[lines] < depth:
                return INVALID
            if nb_bits[lines] > depth:
                continue

            skim_level = 0
            for line in range(n):
                if bits >> line & 1:
                    continue
                for cross in bit_values(lines):
                    ret = remove_candidates(grid, cell_index(line, cross, transposed), bit, stats, session)
                    if ret:
                        skim_level = depth
                        if ret < 0:
                            return INVALID

            if skim_level:
                if session.wants_messages:
                    _line_exclusion_message(grid, value, bits, lines, transposed, session)
                stats.record_rule(RuleKind.LINE_EXCLUSION, skim_level)
                if skim_level > 1:
                    return skim_level
                fired = skim_level
        return fired

    def row_columns() -> List[int]:
        return [sum(1 << c for c in range(n) if grid.cells[r * n + c] & bit) for r in range(n)]

    return _skim_subsets(n, nb_bits, row_columns, check)


def _line_exclusion_message(grid, value, bits, lines, transposed, session) -> None:
    n = grid.size
    rows, cols = row_names(n), column_names(n)
    if transposed:
        first, second = ("columns", "rows")
        first_names = " ".join(cols[c - 1] for c in bit_values(bits))
        second_names = " ".join(rows[r - 1] for r in bit_values(lines))
        cells = [(r - 1) * n + c - 1 for c in bit_values(bits) for r in range(1, n + 1)]
    else:
        first, second = ("rows", "columns")
        first_names = " ".join(rows[r - 1] for r in bit_values(bits))
        second_names = " ".join(cols[c - 1] for c in bit_values(lines))
        cells = [(r - 1) * n + c for r in bit_values(bits) for c in range(n)]

    count = int(grid.tables.nb_bits[bits])
    v = value_name(value)
    if count > 1:
        session.emit_message(
            grid.id,
            f"Value {v} in each one of the {count} {first} [ {first_names} ] lie only in one "
            f"of the {second} [ {second_names} ].\n"
            f"-> Value {v} in each one of the {count} {second} [ {second_names} ] can only lie "
            f"in the {first} [ {first_names} ].\n",
            1,
        )
    elif not any(grid.given[i] and grid.cells[i] & (1 << (value - 1)) for i in cells):
        session.emit_message(
            grid.id,
            f"Value {v} in {first[:-1]} [ {first_names} ] lies only in {second[:-1]} [ {second_names} ].\n"
            f"-> Value {v} in {second[:-1]} [ {second_names} ] can only lie in the "
            f"{first[:-1]} [ {first_names} ].\n",
            3,
        )


def intersection_skim(grid: CandidateGrid, intersection_index: int,
                      stats: SolverStats, session: SolveSession) -> int:
    """
    Apply intersection exclusion to a box/line overlap.

    A value present on one side of the overlap only (box outside the line,
    or line outside the box) must lie in the overlap, hence cannot lie on
    the other side either. The skim level is the number of values removed.
    """
    inter = grid.topology.intersections[intersection_index]
    box_values = 0
    for i in inter.box_side:
        box_values |= grid.cells[i]
    line_values = 0
    for i in inter.line_side:
        line_values |= grid.cells[i]

    excluded = box_values ^ line_values
    if not excluded:
        return 0

    count = int(grid.tables.nb_bits[excluded])
    stats.record_rule(RuleKind.INTERSECTION_EXCLUSION, count, weight=count)

    if session.wants_messages:
        plural = "values" if count > 1 else "value"
        session.emit_message(
            grid.id,
            f"{inter.name}: the {plural} ({values_string(excluded)}) can only lie in {inter.name}.\n",
            1,
        )

    for i in inter.box_side + inter.line_side:
        if remove_candidates(grid, i, excluded, stats, session) < 0:
            return INVALID

    return count
