"""Copy constraints as a union-find over an arena of cells.

Each distinct Cell gets an integer id on first use; parent and rank are plain
lists indexed by that id. Components are the equivalence classes of cells
declared equal, directly or transitively.
"""

from typing import Dict, Iterable, List

from plonk.columns import Cell, Column
from plonk.errors import SetupError, SetupErrorReason


class Permutation:
    """Disjoint-set structure over cells of equality-enabled columns."""

    def __init__(self, equality_columns: Iterable[Column]):
        self._columns = frozenset(equality_columns)
        self._ids: Dict[Cell, int] = {}
        self.cells: List[Cell] = []
        self._parent: List[int] = []
        self._rank: List[int] = []
        self.num_copies = 0

    def _id(self, cell: Cell) -> int:
        if cell.column not in self._columns:
            raise SetupError(SetupErrorReason.COLUMN_NOT_EQUALITY_ENABLED, f"{cell.column}")
        idx = self._ids.get(cell)
        if idx is None:
            idx = len(self.cells)
            self._ids[cell] = idx
            self.cells.append(cell)
            self._parent.append(idx)
            self._rank.append(0)
        return idx

    def find(self, idx: int) -> int:
        parent = self._parent
        while parent[idx] != idx:
            parent[idx] = parent[parent[idx]]  # path halving
            idx = parent[idx]
        return idx

    def copy(self, left: Cell, right: Cell) -> None:
        """Declare `left` and `right` equal."""
        a = self.find(self._id(left))
        b = self.find(self._id(right))
        self.num_copies += 1
        if a == b:
            return
        if self._rank[a] < self._rank[b]:
            a, b = b, a
        self._parent[b] = a
        if self._rank[a] == self._rank[b]:
            self._rank[a] += 1

    def same_component(self, left: Cell, right: Cell) -> bool:
        if left not in self._ids or right not in self._ids:
            return left == right
        return self.find(self._ids[left]) == self.find(self._ids[right])

    def components(self) -> List[List[Cell]]:
        """Equivalence classes with at least two cells.

        Cells keep insertion order; classes are ordered by their first cell.
        """
        groups: Dict[int, List[Cell]] = {}
        for idx, cell in enumerate(self.cells):
            groups.setdefault(self.find(idx), []).append(cell)
        return [group for group in groups.values() if len(group) > 1]
