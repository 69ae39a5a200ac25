"""Knuth's Algorithm X with Dancing Links, over named columns and subsets."""

from __future__ import annotations
from typing import Callable, Dict, Iterator, List, Optional


class DLXNode:
    """A node in the Dancing Links structure."""
    __slots__ = ['left', 'right', 'up', 'down', 'column', 'subset']

    def __init__(self, subset: Optional[str] = None):
        self.left = self
        self.right = self
        self.up = self
        self.down = self
        self.column = None
        self.subset = subset


class ColumnNode(DLXNode):
    """Column header node with size counter."""
    __slots__ = ['size', 'name', 'covered']

    def __init__(self, name: str = ""):
        super().__init__()
        self.size = 0
        self.name = name
        self.covered = False
        self.column = self


Displayer = Callable[[List[str]], None]


def _split(elements: str, sep: str) -> List[str]:
    return [e for e in elements.split(sep) if e]


class Universe:
    """
    An exact cover problem: a set of named columns (the elements to cover)
    and named subsets of them.

    A solution is a collection of subsets covering every column exactly once.

    Example:
        >>> u = Universe("a|b|c")
        >>> u.define_subset("x", "a|b")
        >>> u.define_subset("y", "c")
        >>> u.search()
        1
    """

    def __init__(self, columns: str, sep: str = "|"):
        """
        Args:
            columns: Column names separated by ``sep``. Empty names are skipped.
            sep: Separator of the column names.

        Raises:
            ValueError: if a column name appears twice.
        """
        self._header = ColumnNode()
        self._columns: Dict[str, ColumnNode] = {}
        self._subsets: Dict[str, DLXNode] = {}
        self._required: List[str] = []
        self._displayer: Optional[Displayer] = None
        self.nodes_explored = 0
        self.backtracks = 0

        for name in _split(columns, sep):
            if name in self._columns:
                raise ValueError(f"Duplicate column {name!r}")
            col = ColumnNode(name)

            # Link horizontally, before the header
            col.left = self._header.left
            col.right = self._header
            self._header.left.right = col
            self._header.left = col

            self._columns[name] = col

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def required(self) -> List[str]:
        """Subsets already placed in every solution."""
        return list(self._required)

    def define_subset(self, name: str, elements: str, sep: str = "|") -> None:
        """
        Add a subset covering the given columns.

        Raises:
            ValueError: if the name is already used, the subset is empty or
                an element is not a column of the universe.
        """
        if name in self._subsets:
            raise ValueError(f"Duplicate subset {name!r}")
        names = _split(elements, sep)
        if not names:
            raise ValueError(f"Subset {name!r} is empty")
        unknown = [e for e in names if e not in self._columns]
        if unknown:
            raise ValueError(f"Subset {name!r} has unknown elements: {', '.join(unknown)}")

        nodes = []
        for element in names:
            col = self._columns[element]
            node = DLXNode(subset=name)
            node.column = col

            # Link vertically (insert above column header)
            node.up = col.up
            node.down = col
            col.up.down = node
            col.up = node
            col.size += 1

            nodes.append(node)

        # Link horizontally (circular)
        for i in range(len(nodes)):
            nodes[i].right = nodes[(i + 1) % len(nodes)]
            nodes[i].left = nodes[(i - 1) % len(nodes)]

        self._subsets[name] = nodes[0]

    def require_in_solution(self, name: str) -> bool:
        """
        Place a subset in every solution before searching.

        Returns:
            False if the subset overlaps a subset already required, in which
            case nothing changes.

        Raises:
            KeyError: if no subset has that name.
        """
        first = self._subsets[name]

        node = first
        while True:
            if node.column.covered:
                return False
            node = node.right
            if node is first:
                break

        node = first
        while True:
            self._cover(node.column)
            node = node.right
            if node is first:
                break

        self._required.append(name)
        return True

    def set_displayer(self, displayer: Optional[Displayer]) -> None:
        """Function called with the subset names of each solution found."""
        self._displayer = displayer

    def search(self, limit: int = 0) -> int:
        """
        Look for exact covers.

        Args:
            limit: Stop after that many solutions; 0 finds them all.

        Returns:
            The number of solutions found.
        """
        count = 0
        for solution in self.solutions(limit):
            count += 1
            if self._displayer is not None:
                self._displayer(solution)
        return count

    def solutions(self, limit: int = 0) -> Iterator[List[str]]:
        """
        Yield each solution as the list of its subset names, required ones
        first. The links are restored when the iterator is exhausted or closed.
        """
        found = 0
        search = self._search([])
        try:
            for partial in search:
                found += 1
                yield self._required + partial
                if limit and found >= limit:
                    break
        finally:
            search.close()

    def _search(self, partial: List[str]) -> Iterator[List[str]]:
        """Recursive Algorithm X."""
        if self._header.right is self._header:
            yield list(partial)
            return

        # Choose column with minimum size
        chosen = None
        min_size = None
        c = self._header.right
        while c is not self._header:
            if min_size is None or c.size < min_size:
                min_size = c.size
                chosen = c
            c = c.right

        if min_size == 0:
            self.backtracks += 1
            return

        self._cover(chosen)
        try:
            row = chosen.down
            while row is not chosen:
                self.nodes_explored += 1
                partial.append(row.subset)
                j = row.right
                while j is not row:
                    self._cover(j.column)
                    j = j.right
                try:
                    yield from self._search(partial)
                finally:
                    j = row.left
                    while j is not row:
                        self._uncover(j.column)
                        j = j.left
                    partial.pop()
                row = row.down
        finally:
            self._uncover(chosen)

    def _cover(self, col: ColumnNode) -> None:
        """Cover a column (remove it and all rows using it)."""
        col.covered = True
        col.right.left = col.left
        col.left.right = col.right

        row = col.down
        while row is not col:
            j = row.right
            while j is not row:
                j.down.up = j.up
                j.up.down = j.down
                j.column.size -= 1
                j = j.right
            row = row.down

    def _uncover(self, col: ColumnNode) -> None:
        """Uncover a column (restore it and all rows using it)."""
        row = col.up
        while row is not col:
            j = row.left
            while j is not row:
                j.column.size += 1
                j.down.up = j
                j.up.down = j
                j = j.left
            row = row.up

        col.right.left = col
        col.left.right = col
        col.covered = False

    def __repr__(self) -> str:
        return f"Universe(columns={len(self._columns)}, subsets={len(self._subsets)})"
