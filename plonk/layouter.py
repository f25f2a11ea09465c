"""Region-based witness layout.

The Layouter is a single-pass linear floor planner: each call to
assign_region() opens a region at the next free row, lets the body assign
cells at region-local offsets, and advances the free-row cursor past the
highest offset the body used. Regions are placed strictly in call order and
placement never backtracks, so regions never overlap.

Example:
    def first_row(region):
        region.enable(config.selector, 0)
        a = region.assign_advice("a", config.col_a, 0, value_a)
        b = region.assign_advice("b", config.col_b, 0, value_b)
        return a, b

    a, b = layouter.assign_region("first row", first_row)
    layouter.constrain_instance(b.cell, config.instance, 0)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple, TypeVar, Union

from plonk.assignment import Assignment
from plonk.columns import Cell, Column, ColumnKind
from plonk.constraint_system import ConstraintSystem
from plonk.errors import SetupError, SetupErrorReason
from plonk.value import Value

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RegionRecord:
    """Placement of one region, kept for diagnostics and layout tooling.

    Attributes:
        index: Position in allocation order
        name: Region name, prefixed by any namespaces
        start: First absolute row
        height: Number of rows used (highest local offset + 1)
        columns: Columns the region touched
        selectors: Absolute rows enabled per selector
        labels: Debug label per assigned cell
        copies: Copy constraints recorded while the region was open
    """
    index: int
    name: str
    start: int
    height: int = 0
    columns: List[Column] = field(default_factory=list)
    selectors: Dict[Column, List[int]] = field(default_factory=dict)
    labels: Dict[Cell, str] = field(default_factory=dict)
    copies: int = 0

    @property
    def end(self) -> int:
        return self.start + self.height

    def contains(self, row: int) -> bool:
        return self.start <= row < self.end


@dataclass(frozen=True)
class AssignedCell:
    """A cell together with the value assigned to it."""
    cell: Cell
    value: Value
    label: str = ""

    def copy_advice(self, label: str, region: "Region", column: Column, offset: int) -> "AssignedCell":
        """Copy this cell's value into `region` and constrain the two cells equal."""
        return region.copy_advice(label, self, column, offset)


def _to_value(value: Any) -> Value:
    if callable(value) and not isinstance(value, Value):
        value = value()
    return value if isinstance(value, Value) else Value.known(value)


def _cell_of(target: Union[AssignedCell, Cell]) -> Cell:
    return target.cell if isinstance(target, AssignedCell) else target


class Region:
    """Handle passed to an assign_region() body; offsets are region-local."""

    def __init__(self, layouter: "Layouter", record: RegionRecord):
        self._layouter = layouter
        self._record = record
        self._closed = False

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def start(self) -> int:
        return self._record.start

    def _row(self, column: Column, offset: int, label: str) -> int:
        if self._closed:
            raise SetupError(SetupErrorReason.REGION_CLOSED, f"region '{self.name}' is closed")
        if not isinstance(offset, int) or offset < 0:
            raise SetupError(SetupErrorReason.ROW_OUT_OF_BOUNDS,
                             f"offset {offset} in region '{self.name}'")
        record = self._record
        record.height = max(record.height, offset + 1)
        if column not in record.columns:
            record.columns.append(column)
        row = record.start + offset
        if label:
            record.labels[Cell(column, row)] = label
        return row

    def assign_advice(self, label: str, column: Column, offset: int, value: Any) -> AssignedCell:
        """Assign a witness value (a Value, field element, int or thunk) to an advice cell."""
        self._layouter.cs.require_column(column, ColumnKind.ADVICE)
        row = self._row(column, offset, label)
        stored = self._layouter.backend.assign_advice(label, column, row, _to_value(value))
        return AssignedCell(Cell(column, row), stored, label)

    def assign_fixed(self, label: str, column: Column, offset: int, value: Any) -> AssignedCell:
        """Assign a circuit constant to a fixed cell."""
        self._layouter.cs.require_column(column, ColumnKind.FIXED)
        row = self._row(column, offset, label)
        stored = self._layouter.backend.assign_fixed(label, column, row, _to_value(value))
        return AssignedCell(Cell(column, row), stored, label)

    def enable(self, selector: Column, offset: int) -> None:
        """Turn `selector` on at `offset`."""
        self._layouter.cs.require_column(selector, ColumnKind.SELECTOR)
        row = self._row(selector, offset, "")
        self._record.selectors.setdefault(selector, []).append(row)
        self._layouter.backend.enable_selector(self.name, selector, row)

    def copy_advice(self, label: str, cell: AssignedCell, column: Column, offset: int) -> AssignedCell:
        """Assign `cell`'s value at (column, offset) and constrain the two cells equal."""
        assigned = self.assign_advice(label, column, offset, cell.value)
        self._layouter.copy(cell.cell, assigned.cell)
        self._record.copies += 1
        return assigned

    def constrain_equal(self, left: Union[AssignedCell, Cell], right: Union[AssignedCell, Cell]) -> None:
        if self._closed:
            raise SetupError(SetupErrorReason.REGION_CLOSED, f"region '{self.name}' is closed")
        self._layouter.copy(_cell_of(left), _cell_of(right))
        self._record.copies += 1

    def assign_advice_from_instance(
        self, label: str, instance: Column, row: int, advice: Column, offset: int
    ) -> AssignedCell:
        """Load a public input into an advice cell, constrained equal to the instance cell."""
        self._layouter.cs.require_column(instance, ColumnKind.INSTANCE)
        if row < 0:
            raise SetupError(SetupErrorReason.ROW_OUT_OF_BOUNDS, f"instance row {row}")
        value = self._layouter.backend.query_instance(instance, row)
        assigned = self.assign_advice(label, advice, offset, value)
        self._layouter.copy(Cell(instance, row), assigned.cell)
        self._record.copies += 1
        return assigned

    def close(self) -> None:
        self._closed = True


class _Floor:
    """Planner state shared by a layouter and its namespaces."""

    def __init__(self):
        self.next_row = 0
        self.regions: List[RegionRecord] = []
        self.open_region = False


class Layouter:
    """Allocates regions in call order on top of an Assignment backend."""

    def __init__(self, cs: ConstraintSystem, backend: Assignment,
                 namespace: Tuple[str, ...] = (), _floor: _Floor = None):
        self.cs = cs
        self.backend = backend
        self._namespace = namespace
        self._floor = _floor if _floor is not None else _Floor()

    @property
    def regions(self) -> List[RegionRecord]:
        return self._floor.regions

    @property
    def next_row(self) -> int:
        """First row not used by any region (the total height so far)."""
        return self._floor.next_row

    def namespace(self, name: str) -> "Layouter":
        """Return a layouter whose region names are prefixed with `name/`."""
        return Layouter(self.cs, self.backend, self._namespace + (name,), self._floor)

    def _qualify(self, name: str) -> str:
        return "/".join(self._namespace + (name,))

    def assign_region(self, name: str, body: Callable[[Region], T]) -> T:
        """Open a region at the next free row, run `body` in it, return its result."""
        floor = self._floor
        if floor.open_region:
            raise SetupError(SetupErrorReason.NESTED_REGION,
                             f"cannot open '{name}' inside another region")
        record = RegionRecord(index=len(floor.regions), name=self._qualify(name), start=floor.next_row)
        floor.regions.append(record)
        region = Region(self, record)

        floor.open_region = True
        self.backend.enter_region(record.name, record.start)
        try:
            result = body(region)
        finally:
            region.close()
            floor.open_region = False
            self.backend.exit_region()

        floor.next_row = record.end
        logger.debug("region %d '%s': rows [%d, %d)", record.index, record.name, record.start, record.end)
        return result

    def constrain_instance(self, cell: Union[AssignedCell, Cell], instance: Column, row: int) -> None:
        """Constrain `cell` to equal the public input at (instance, row)."""
        self.cs.require_column(instance, ColumnKind.INSTANCE)
        if row < 0:
            raise SetupError(SetupErrorReason.ROW_OUT_OF_BOUNDS, f"instance row {row}")
        self.copy(_cell_of(cell), Cell(instance, row))

    def copy(self, left: Cell, right: Cell) -> None:
        for cell in (left, right):
            self.cs.require_column(cell.column)
            if not self.cs.is_equality_enabled(cell.column):
                raise SetupError(SetupErrorReason.COLUMN_NOT_EQUALITY_ENABLED, f"{cell.column}")
        self.backend.copy(left, right)
