"""Circuit shape without private data.

CircuitLayout synthesizes circuit.without_witnesses() against a recorder that
stores no values and has no row limit, then reports where every region landed.
Useful for picking k before running the mock prover, which never auto-sizes.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from plonk.assignment import Assignment
from plonk.circuit import Circuit
from plonk.columns import Cell, Column, ColumnKind
from plonk.constraint_system import ConstraintSystem
from plonk.layouter import Layouter
from plonk.value import Value

logger = logging.getLogger(__name__)


class LayoutRecorder(Assignment):
    """Assignment backend that only counts; every value stays unknown."""

    def __init__(self):
        self.num_copies = 0
        self.max_instance_row = -1

    def enable_selector(self, label: str, selector: Column, row: int) -> None:
        pass

    def assign_advice(self, label: str, column: Column, row: int, value: Value) -> Value:
        return value

    def assign_fixed(self, label: str, column: Column, row: int, value: Value) -> Value:
        return value

    def query_instance(self, column: Column, row: int) -> Value:
        self.max_instance_row = max(self.max_instance_row, row)
        return Value.unknown()

    def copy(self, left: Cell, right: Cell) -> None:
        self.num_copies += 1
        for cell in (left, right):
            if cell.column.kind is ColumnKind.INSTANCE:
                self.max_instance_row = max(self.max_instance_row, cell.row)


@dataclass(frozen=True)
class RegionShape:
    """Rows and columns one region occupies."""
    index: int
    name: str
    start: int
    height: int
    columns: Tuple[Column, ...]
    enabled_selector_rows: int
    copies: int

    @property
    def end(self) -> int:
        return self.start + self.height


@dataclass(frozen=True)
class CircuitLayout:
    """Region placement of a circuit plus its constraint-system counts."""
    regions: Tuple[RegionShape, ...]
    total_rows: int
    instance_rows: int
    num_advice_columns: int
    num_fixed_columns: int
    num_instance_columns: int
    num_selectors: int
    num_gates: int
    degree: int
    num_copies: int

    @classmethod
    def from_circuit(cls, circuit: Circuit) -> "CircuitLayout":
        shape_only = circuit.without_witnesses()
        cs = ConstraintSystem()
        config = type(shape_only).configure(cs)
        recorder = LayoutRecorder()
        layouter = Layouter(cs, recorder)
        shape_only.synthesize(config, layouter)

        regions = tuple(
            RegionShape(
                index=record.index,
                name=record.name,
                start=record.start,
                height=record.height,
                columns=tuple(record.columns),
                enabled_selector_rows=sum(len(rows) for rows in record.selectors.values()),
                copies=record.copies,
            )
            for record in layouter.regions
        )
        layout = cls(
            regions=regions,
            total_rows=layouter.next_row,
            instance_rows=recorder.max_instance_row + 1,
            num_advice_columns=cs.num_advice_columns,
            num_fixed_columns=cs.num_fixed_columns,
            num_instance_columns=cs.num_instance_columns,
            num_selectors=cs.num_selectors,
            num_gates=len(cs.gates),
            degree=cs.degree(),
            num_copies=recorder.num_copies,
        )
        logger.debug("layout of %s: %d region(s), %d row(s)",
                     type(circuit).__name__, len(regions), layout.total_rows)
        return layout

    def minimum_k(self) -> int:
        """Smallest k >= 1 such that 2^k rows hold every region and public input."""
        rows = max(self.total_rows, self.instance_rows, 1)
        k = 1
        while (1 << k) < rows:
            k += 1
        return k

    def format(self) -> str:
        """Render the layout as a plain-text table."""
        lines: List[str] = [
            f"columns: {self.num_advice_columns} advice, {self.num_fixed_columns} fixed, "
            f"{self.num_instance_columns} instance, {self.num_selectors} selector",
            f"gates: {self.num_gates} (max degree {self.degree}), copy constraints: {self.num_copies}",
            f"rows used: {self.total_rows} (minimum k = {self.minimum_k()})",
            "",
            f"{'#':>3}  {'rows':<11} {'region':<28} columns",
        ]
        for region in self.regions:
            span = f"[{region.start}, {region.end})"
            columns = ", ".join(str(column) for column in region.columns)
            lines.append(f"{region.index:>3}  {span:<11} {region.name:<28} {columns}")
        return "\n".join(lines)
