"""Mock prover: checks a concrete witness against a circuit's constraints.

No proof is produced. The mock prover runs configure() and synthesize() once,
keeps the resulting cell grid, and verify() then checks

1. Gates - every gate polynomial must vanish at every row where the gate's
   selector is on. Polynomials are evaluated over whole columns at once: a
   query at rotation r reads the column rolled by -r (wrapping modulo n),
   exactly like the prover-side constraint context evaluates next/prev rows.
2. Copy constraints - every component of the copy-constraint graph must hold
   a single value.

Every failure is collected; nothing stops at the first one.

Example:
    prover = MockProver.run(4, circuit, [[FF(55)]])
    prover.assert_satisfied()

    result = check(4, circuit, [[FF(55)]])
    if result.status is CheckStatus.SETUP_ERROR: ...
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from dev.failure import (
    CellNotAssigned,
    CheckResult,
    ConstraintNotSatisfied,
    CopyConstraintViolated,
    RegionLocation,
)
from plonk.assignment import Assignment
from plonk.circuit import Circuit
from plonk.columns import Cell, Column, ColumnKind, Rotation
from plonk.constraint_system import ConstraintSystem, Gate
from plonk.errors import SetupError, SetupErrorReason
from plonk.expressions import AdviceQuery, EvaluationContext, Expression, Query
from plonk.layouter import Layouter, RegionRecord
from plonk.permutation import Permutation
from plonk.value import Value
from primitives.field import FF, field_repr, to_field

logger = logging.getLogger(__name__)


# --- Configuration ---

@dataclass
class MockProverConfig:
    """Mock prover options.

    Attributes:
        wrap_rotations: Rotations wrap modulo n; when False, a rotation that
            leaves [0, n) at an enabled row is a SetupError
        field: galois field to check over; defaults to the circuit's FIELD, else FF
    """
    wrap_rotations: bool = True
    field: Optional[type] = None


# --- Column Evaluation ---

class _ColumnContext(EvaluationContext):
    """Evaluates expressions over all n rows at once."""

    def __init__(self, prover: "MockProver"):
        self._prover = prover
        self._field = prover.field

    def _rotate(self, values, rotation: Rotation):
        if rotation.offset == 0:
            return values
        # row r reads row r + offset
        return self._field(np.roll(np.asarray(values), -rotation.offset))

    def constant(self, value):
        return to_field(self._field, value)

    def advice(self, column: Column, rotation: Rotation):
        return self._rotate(self._prover.advice[column], rotation)

    def fixed(self, column: Column, rotation: Rotation):
        return self._rotate(self._prover.fixed[column], rotation)

    def instance(self, column: Column, rotation: Rotation):
        return self._rotate(self._prover.instance[column], rotation)

    def selector(self, column: Column):
        return self._field(self._prover.selectors[column].astype(np.int64))


def _distinct_queries(polys: Sequence[Expression]) -> List[Query]:
    seen: Dict[Tuple[type, Column, int], Query] = {}
    for poly in polys:
        for query in poly.queries():
            seen.setdefault((type(query), query.column, query.rotation.offset), query)
    return list(seen.values())


# --- Mock Prover ---

class MockProver(Assignment):
    """Cell grid of one synthesis pass over 2^k rows, plus its checker.

    Attributes:
        k: Size exponent
        n: Number of rows (2^k)
        cs: Constraint system built by configure()
        field: galois field values live in
        advice / fixed / instance: Column values (galois arrays of length n)
        advice_known: Per advice column, which rows hold a known value
        selectors: Per selector, which rows are enabled
        permutation: Copy constraints
        regions: Region placements recorded by the layouter
    """

    def __init__(self, k: int, cs: ConstraintSystem, field: type, config: MockProverConfig):
        self.k = k
        self.n = 1 << k
        self.cs = cs
        self.field = field
        self.config = config
        n = self.n

        self.advice = {col: field.Zeros(n) for col in cs.columns(ColumnKind.ADVICE)}
        self.advice_known = {col: np.zeros(n, dtype=bool) for col in cs.columns(ColumnKind.ADVICE)}
        self.fixed = {col: field.Zeros(n) for col in cs.columns(ColumnKind.FIXED)}
        self.instance = {col: field.Zeros(n) for col in cs.columns(ColumnKind.INSTANCE)}
        self.selectors = {col: np.zeros(n, dtype=bool) for col in cs.columns(ColumnKind.SELECTOR)}
        self.permutation = Permutation(cs.equality_columns)
        self.regions: List[RegionRecord] = []

    @classmethod
    def run(
        cls,
        k: int,
        circuit: Circuit,
        instances: Sequence[Sequence],
        config: Optional[MockProverConfig] = None,
    ) -> "MockProver":
        """Configure and synthesize `circuit` on 2^k rows with the given public inputs.

        Args:
            k: Size exponent, a positive int; the circuit gets 2^k rows
            circuit: Circuit instance carrying the witness
            instances: One sequence of public inputs per instance column
            config: Checker options

        Returns:
            MockProver holding the synthesized grid; call verify() on it

        Raises:
            SetupError: The circuit does not fit or is malformed
            SynthesisError: The circuit failed to compute its witness
        """
        config = config or MockProverConfig()
        if isinstance(k, bool) or not isinstance(k, int) or k < 1:
            raise SetupError(SetupErrorReason.INVALID_K, f"k must be a positive integer, got {k!r}")
        field = config.field or getattr(circuit, "FIELD", FF)

        cs = ConstraintSystem()
        circuit_config = type(circuit).configure(cs)

        prover = cls(k, cs, field, config)
        prover._bind_instances(instances)

        layouter = Layouter(cs, prover)
        circuit.synthesize(circuit_config, layouter)
        prover.regions = list(layouter.regions)
        prover._check_rotations()

        logger.info("k=%d: %d region(s) over %d of %d rows, %d gate(s), %d copy constraint(s)",
                    k, len(prover.regions), layouter.next_row, prover.n,
                    len(cs.gates), prover.permutation.num_copies)
        return prover

    # --- Setup ---

    def _check_row(self, row: int) -> None:
        if row >= self.n:
            raise SetupError(SetupErrorReason.CIRCUIT_TOO_LARGE,
                             f"row {row} does not fit in 2^{self.k} = {self.n} rows")

    def _bind_instances(self, instances: Sequence[Sequence]) -> None:
        columns = self.cs.columns(ColumnKind.INSTANCE)
        if len(instances) != len(columns):
            raise SetupError(SetupErrorReason.INVALID_INSTANCES,
                             f"expected {len(columns)} instance column(s), got {len(instances)}")
        for column, values in zip(columns, instances):
            if len(values) > self.n:
                raise SetupError(SetupErrorReason.CIRCUIT_TOO_LARGE,
                                 f"{len(values)} public inputs for {column} exceed {self.n} rows")
            for row, value in enumerate(values):
                self.instance[column][row] = to_field(self.field, value)

    def _check_rotations(self) -> None:
        if self.config.wrap_rotations:
            return
        for gate in self.cs.gates:
            rows = np.flatnonzero(self.selectors[gate.selector])
            for query in _distinct_queries(gate.polys):
                shifted = rows + query.rotation.offset
                bad = rows[(shifted < 0) | (shifted >= self.n)]
                if bad.size:
                    raise SetupError(
                        SetupErrorReason.ROW_OUT_OF_BOUNDS,
                        f"gate '{gate.name}' enabled at row {bad[0]} reads {query} "
                        f"at row {bad[0] + query.rotation.offset}")

    # --- Assignment ---

    def enable_selector(self, label: str, selector: Column, row: int) -> None:
        self._check_row(row)
        self.selectors[selector][row] = True

    def assign_advice(self, label: str, column: Column, row: int, value: Value) -> Value:
        self._check_row(row)
        if value.is_known():
            elem = to_field(self.field, value.evaluate())
            self.advice[column][row] = elem
            self.advice_known[column][row] = True
            return Value.known(elem)
        self.advice[column][row] = 0
        self.advice_known[column][row] = False
        return Value.unknown()

    def assign_fixed(self, label: str, column: Column, row: int, value: Value) -> Value:
        self._check_row(row)
        if not value.is_known():
            # fixed cells default to zero
            return Value.unknown()
        elem = to_field(self.field, value.evaluate())
        self.fixed[column][row] = elem
        return Value.known(elem)

    def query_instance(self, column: Column, row: int) -> Value:
        self._check_row(row)
        return Value.known(self.instance[column][row])

    def copy(self, left: Cell, right: Cell) -> None:
        self._check_row(left.row)
        self._check_row(right.row)
        self.permutation.copy(left, right)

    # --- Grid Access ---

    def cell_value(self, cell: Cell) -> Optional[int]:
        """Integer value of `cell`, or None for an advice cell with no known value."""
        row = cell.row % self.n
        kind = cell.column.kind
        if kind is ColumnKind.ADVICE:
            if not self.advice_known[cell.column][row]:
                return None
            return int(self.advice[cell.column][row])
        if kind is ColumnKind.FIXED:
            return int(self.fixed[cell.column][row])
        if kind is ColumnKind.INSTANCE:
            return int(self.instance[cell.column][row])
        return int(self.selectors[cell.column][row])

    def region_at(self, row: int) -> Optional[RegionLocation]:
        for record in self.regions:
            if record.contains(row):
                return RegionLocation(record.index, record.name, row - record.start)
        return None

    # --- Verification ---

    def verify(self) -> CheckResult:
        """Check every gate and copy constraint; return all failures found."""
        gate_failures: List[ConstraintNotSatisfied] = []
        incomplete: List[CellNotAssigned] = []
        for gate_index, gate in enumerate(self.cs.gates):
            failures, missing = self._check_gate(gate_index, gate)
            gate_failures.extend(failures)
            incomplete.extend(missing)
        gate_failures.sort(key=lambda f: (f.row, f.gate_index, f.constraint_index))
        incomplete.sort(key=lambda f: (f.cell.row, f.gate_index, f.cell.column.index))

        copy_failures, copy_missing = self._check_copies()
        result = CheckResult.from_failures(gate_failures, copy_failures, incomplete + copy_missing)

        for failure in result.failures:
            logger.debug("%s", failure)
        logger.info("check %s: %d gate failure(s), %d copy failure(s), %d unassigned cell(s)",
                    result.status.value, len(result.gate_failures),
                    len(result.copy_failures), len(result.incomplete))
        return result

    def assert_satisfied(self) -> None:
        """Raise AssertionError listing every failure unless the circuit is satisfied."""
        result = self.verify()
        if not result.is_satisfied:
            raise AssertionError(f"circuit was not satisfied:\n\n{result}")

    def _check_gate(
        self, gate_index: int, gate: Gate
    ) -> Tuple[List[ConstraintNotSatisfied], List[CellNotAssigned]]:
        enabled = self.selectors[gate.selector]
        if not enabled.any():
            return [], []

        ctx = _ColumnContext(self)
        zeros = self.field.Zeros(self.n)
        failures: List[ConstraintNotSatisfied] = []
        missing: Dict[Cell, CellNotAssigned] = {}
        for constraint_index, poly in enumerate(gate.polys):
            queries = _distinct_queries([poly])
            advice_queries = [q for q in queries if isinstance(q, AdviceQuery)]

            # Rows where every advice cell this polynomial reads holds a known value
            known = np.ones(self.n, dtype=bool)
            for query in advice_queries:
                known &= np.roll(self.advice_known[query.column], -query.rotation.offset)

            # An unknown cell is reported once per gate, however many rows read it
            for row in np.flatnonzero(enabled & ~known):
                for query in advice_queries:
                    target = (int(row) + query.rotation.offset) % self.n
                    cell = Cell(query.column, target)
                    if not self.advice_known[query.column][target] and cell not in missing:
                        missing[cell] = CellNotAssigned(cell, self.region_at(target), gate.name, gate_index)

            values = poly.evaluate(ctx) + zeros
            nonzero = np.asarray(values) != 0
            for row in np.flatnonzero(enabled & known & nonzero):
                row = int(row)
                failures.append(ConstraintNotSatisfied(
                    gate=gate.name,
                    gate_index=gate_index,
                    constraint_index=constraint_index,
                    constraint_name=gate.constraint_names[constraint_index],
                    row=row,
                    region=self.region_at(row),
                    cell_values=self._query_values(queries, row),
                ))
        return failures, list(missing.values())

    def _query_values(self, queries: List[Query], row: int) -> Tuple[Tuple[str, str], ...]:
        values = []
        for query in queries:
            target = (row + query.rotation.offset) % self.n
            if query.column.is_selector:
                value = int(self.selectors[query.column][target])
            else:
                value = self.cell_value(Cell(query.column, target))
            shown = "unassigned" if value is None else field_repr(self.field(value))
            values.append((f"{query} (row {target})", shown))
        return tuple(values)

    def _check_copies(self) -> Tuple[List[CopyConstraintViolated], List[CellNotAssigned]]:
        failures: List[CopyConstraintViolated] = []
        missing: List[CellNotAssigned] = []
        for component in self.permutation.components():
            values = []
            for cell in component:
                value = self.cell_value(cell)
                if value is None:
                    missing.append(CellNotAssigned(cell, self.region_at(cell.row)))
                else:
                    values.append((cell, value))
            if len({value for _, value in values}) > 1:
                failures.append(CopyConstraintViolated(tuple(component), tuple(values)))
        return failures, missing


def check(
    k: int,
    circuit: Circuit,
    instances: Sequence[Sequence],
    config: Optional[MockProverConfig] = None,
) -> CheckResult:
    """Run and verify `circuit`, reporting setup errors as a SETUP_ERROR result.

    Only SetupError becomes data. A SynthesisError means the circuit's own
    witness code failed (e.g. it called Value.evaluate() on an unknown value)
    and propagates to the caller unchanged.
    """
    try:
        prover = MockProver.run(k, circuit, instances, config)
    except SetupError as e:
        logger.info("setup error: %s", e)
        return CheckResult.from_setup_error(e)
    return prover.verify()
