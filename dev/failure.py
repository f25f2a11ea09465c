"""Check results reported by the mock prover.

A check ends in one of three states, which is all a caller has to branch on:

    SATISFIED     every gate and copy constraint holds
    UNSATISFIED   at least one failure was collected (all failures are reported)
    SETUP_ERROR   the circuit could not be laid out; nothing was evaluated

Failures come in three classes, so callers can tell "wrong" from "unfinished":

    ConstraintNotSatisfied   a gate polynomial is non-zero at an enabled row
    CopyConstraintViolated   a copy-constraint component holds conflicting values
    CellNotAssigned          a cell needed by a gate or copy constraint has no value
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from plonk.columns import Cell
from plonk.errors import SetupError


class CheckStatus(Enum):
    SATISFIED = "satisfied"
    UNSATISFIED = "unsatisfied"
    SETUP_ERROR = "setup error"


@dataclass(frozen=True)
class RegionLocation:
    """Where a row sits relative to the region that owns it."""
    index: int
    name: str
    offset: int

    def __str__(self) -> str:
        return f"Region {self.index} ('{self.name}') at offset {self.offset}"


def _where(region: Optional[RegionLocation], row: int) -> str:
    if region is None:
        return f"outside any region at row {row}"
    return f"in {region} (row {row})"


@dataclass(frozen=True)
class ConstraintNotSatisfied:
    """A gate polynomial evaluated to a non-zero value at a row where its selector is on.

    Attributes:
        gate: Gate name
        gate_index: Gate position in the constraint system
        constraint_index: Polynomial position within the gate
        constraint_name: Polynomial name ("" when unnamed)
        row: Absolute row the gate was checked at
        region: Region owning the row, if any
        cell_values: (query, value) for every cell the polynomial read
    """
    gate: str
    gate_index: int
    constraint_index: int
    constraint_name: str
    row: int
    region: Optional[RegionLocation]
    cell_values: Tuple[Tuple[str, str], ...] = ()

    def __str__(self) -> str:
        constraint = f"Constraint {self.constraint_index}"
        if self.constraint_name:
            constraint += f" ('{self.constraint_name}')"
        lines = [f"{constraint} in gate {self.gate_index} ('{self.gate}') is not satisfied "
                 f"{_where(self.region, self.row)}"]
        lines.extend(f"- {query} = {value}" for query, value in self.cell_values)
        return "\n".join(lines)


@dataclass(frozen=True)
class CellNotAssigned:
    """A cell required by a gate (or by a copy constraint, when `gate` is None) has no value."""
    cell: Cell
    region: Optional[RegionLocation]
    gate: Optional[str] = None
    gate_index: Optional[int] = None

    def __str__(self) -> str:
        where = _where(self.region, self.cell.row)
        if self.gate is None:
            return f"Copy-constrained cell {self.cell.column} is not assigned {where}"
        return (f"Gate {self.gate_index} ('{self.gate}') reads cell {self.cell.column}, "
                f"which is not assigned {where}")


@dataclass(frozen=True)
class CopyConstraintViolated:
    """Cells constrained equal (directly or transitively) hold different values.

    Attributes:
        cells: Every cell of the offending component
        values: (cell, value) for each member with a concrete value
    """
    cells: Tuple[Cell, ...]
    values: Tuple[Tuple[Cell, int], ...]

    @property
    def distinct_values(self) -> Tuple[int, ...]:
        seen = []
        for _, value in self.values:
            if value not in seen:
                seen.append(value)
        return tuple(seen)

    def __str__(self) -> str:
        lines = [f"Copy constraint over {len(self.cells)} cells holds "
                 f"{len(self.distinct_values)} distinct values"]
        lines.extend(f"- {cell} = {value}" for cell, value in self.values)
        return "\n".join(lines)


@dataclass
class CheckResult:
    """Outcome of a mock-prover check."""
    status: CheckStatus
    gate_failures: List[ConstraintNotSatisfied] = field(default_factory=list)
    copy_failures: List[CopyConstraintViolated] = field(default_factory=list)
    incomplete: List[CellNotAssigned] = field(default_factory=list)
    setup_error: Optional[SetupError] = None

    @classmethod
    def from_failures(
        cls,
        gate_failures: List[ConstraintNotSatisfied],
        copy_failures: List[CopyConstraintViolated],
        incomplete: List[CellNotAssigned],
    ) -> "CheckResult":
        failed = gate_failures or copy_failures or incomplete
        status = CheckStatus.UNSATISFIED if failed else CheckStatus.SATISFIED
        return cls(status, list(gate_failures), list(copy_failures), list(incomplete))

    @classmethod
    def from_setup_error(cls, error: SetupError) -> "CheckResult":
        return cls(CheckStatus.SETUP_ERROR, setup_error=error)

    @property
    def is_satisfied(self) -> bool:
        return self.status is CheckStatus.SATISFIED

    @property
    def failures(self) -> list:
        return [*self.gate_failures, *self.copy_failures, *self.incomplete]

    def __str__(self) -> str:
        if self.status is CheckStatus.SETUP_ERROR:
            return f"Setup error: {self.setup_error}"
        if self.is_satisfied:
            return "Satisfied"
        return "\n\n".join(str(failure) for failure in self.failures)
