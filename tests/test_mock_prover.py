"""Tests for the mock prover: gate checks, copy checks and setup errors.

The Fibonacci circuits are checked end to end with honest and tampered
witnesses; small purpose-built circuits cover rotations, fixed columns,
public-input loading and transitive copy constraints.
"""

import logging

import pytest

from circuits import FibonacciColumnsCircuit, FibonacciRotationCircuit
from dev import (
    CellNotAssigned,
    CheckStatus,
    MockProver,
    MockProverConfig,
    RegionLocation,
    check,
)
from plonk.circuit import Circuit
from plonk.columns import Cell, ColumnKind, Rotation
from plonk.errors import SetupError, SetupErrorReason, SynthesisError
from plonk.value import Value
from primitives.field import FF, PALLAS


# --- Test circuits ---

class TamperedColumns(FibonacciColumnsCircuit):
    """Three-column Fibonacci with f(5) off by one."""

    def next_term(self, index, prev, cur):
        term = super().next_term(index, prev, cur)
        return term + self.FIELD(1) if index == 5 else term


class TamperedRotation(FibonacciRotationCircuit):
    """Single-column Fibonacci with f(5) off by one."""

    def next_term(self, index, prev, cur):
        term = super().next_term(index, prev, cur)
        return term + self.FIELD(1) if index == 5 else term


class ConstantColumn(Circuit):
    """One advice column; gate "constant" checks a(next) = a(cur) at enabled rows."""

    def __init__(self, values, enabled):
        self.values = values
        self.enabled = enabled

    @classmethod
    def configure(cls, cs):
        advice = cs.advice_column()
        selector = cs.selector()
        a = cs.query_advice(advice, Rotation.cur())
        a_next = cs.query_advice(advice, Rotation.next())
        s = cs.query_selector(selector)
        cs.create_gate("constant", selector, [s * (a_next - a)])
        return advice, selector

    def synthesize(self, config, layouter):
        advice, selector = config

        def column(region):
            for offset, value in enumerate(self.values):
                region.assign_advice("a", advice, offset, value)
            for offset in self.enabled:
                region.enable(selector, offset)

        layouter.assign_region("column", column)

    def without_witnesses(self):
        return ConstantColumn([Value.unknown()] * len(self.values), self.enabled)


class PublicSquare(Circuit):
    """Loads x from the instance column and checks x * x against a fixed constant."""

    def __init__(self, square):
        self.square = square

    @classmethod
    def configure(cls, cs):
        advice = cs.advice_column()
        fixed = cs.fixed_column()
        instance = cs.instance_column()
        selector = cs.selector()
        cs.enable_equality(advice)
        cs.enable_equality(instance)
        x = cs.query_advice(advice)
        c = cs.query_fixed(fixed)
        s = cs.query_selector(selector)
        cs.create_gate("square", selector, [("x^2 = c", s * (x * x - c))])
        return advice, fixed, instance, selector

    def synthesize(self, config, layouter):
        advice, fixed, instance, selector = config

        def load(region):
            region.enable(selector, 0)
            region.assign_advice_from_instance("x", instance, 0, advice, 0)
            region.assign_fixed("c", fixed, 0, self.square)

        layouter.assign_region("load", load)

    def without_witnesses(self):
        return self


class CopyChain(Circuit):
    """Three advice cells x, y, z with x = y and y = z."""

    def __init__(self, x, y, z):
        self.x, self.y, self.z = x, y, z

    @classmethod
    def configure(cls, cs):
        advice = cs.advice_column()
        cs.enable_equality(advice)
        return advice

    def synthesize(self, advice, layouter):
        def chain(region):
            x = region.assign_advice("x", advice, 0, self.x)
            y = region.assign_advice("y", advice, 1, self.y)
            z = region.assign_advice("z", advice, 2, self.z)
            region.constrain_equal(x, y)
            region.constrain_equal(y, z)

        layouter.assign_region("chain", chain)

    def without_witnesses(self):
        return CopyChain(Value.unknown(), Value.unknown(), Value.unknown())


class TwoConstraints(Circuit):
    """Gate "pair" holds a = b and c * c = c on one row."""

    def __init__(self, a, b, c):
        self.a, self.b, self.c = a, b, c

    @classmethod
    def configure(cls, cs):
        col_a = cs.advice_column()
        col_b = cs.advice_column()
        col_c = cs.advice_column()
        selector = cs.selector()
        a, b, c = cs.query_advice(col_a), cs.query_advice(col_b), cs.query_advice(col_c)
        cs.create_gate("pair", selector, [a - b, c * c - c])
        return col_a, col_b, col_c, selector

    def synthesize(self, config, layouter):
        col_a, col_b, col_c, selector = config

        def row(region):
            region.enable(selector, 0)
            region.assign_advice("a", col_a, 0, self.a)
            region.assign_advice("b", col_b, 0, self.b)
            region.assign_advice("c", col_c, 0, self.c)

        layouter.assign_region("row", row)

    def without_witnesses(self):
        return TwoConstraints(Value.unknown(), Value.unknown(), Value.unknown())


class EagerWitness(Circuit):
    """Evaluates an unknown witness value during synthesis."""

    @classmethod
    def configure(cls, cs):
        return cs.advice_column()

    def synthesize(self, advice, layouter):
        layouter.assign_region(
            "eager", lambda region: region.assign_advice("x", advice, 0, Value.unknown().evaluate()))

    def without_witnesses(self):
        return self


# --- Fibonacci end to end ---

class TestFibonacciColumns:
    """Three-column Fibonacci over BN254 Fr."""

    def test_honest_witness_satisfied(self) -> None:
        prover = MockProver.run(4, FibonacciColumnsCircuit(1, 1), [[55]])
        result = prover.verify()
        assert result.status is CheckStatus.SATISFIED
        assert result.failures == []
        assert str(result) == "Satisfied"
        prover.assert_satisfied()

    def test_grid_contents(self) -> None:
        prover = MockProver.run(4, FibonacciColumnsCircuit(1, 1), [[55]])
        col_a, col_b, col_c = prover.cs.columns(ColumnKind.ADVICE)
        assert prover.field is FF
        assert prover.cell_value(Cell(col_c, 7)) == 55
        assert prover.cell_value(Cell(col_a, 3)) == 3
        assert prover.cell_value(Cell(col_b, 8)) is None
        assert prover.selectors[prover.cs.columns(ColumnKind.SELECTOR)[0]].sum() == 8

    def test_regions(self) -> None:
        prover = MockProver.run(4, FibonacciColumnsCircuit(1, 1), [[55]])
        assert len(prover.regions) == 8
        assert prover.regions[0].name == "first row/first row"
        assert prover.region_at(3) == RegionLocation(3, "step 5/row 5", 0)
        assert prover.region_at(8) is None

    def test_exact_fit(self) -> None:
        """Ten terms need 8 rows, so k = 3 is enough."""
        assert check(3, FibonacciColumnsCircuit(1, 1), [[55]]).is_satisfied

    def test_tampered_term_fails_at_first_use(self) -> None:
        result = check(4, TamperedColumns(1, 1), [[55]])
        assert result.status is CheckStatus.UNSATISFIED
        assert [f.row for f in result.gate_failures] == [3]

        failure = result.gate_failures[0]
        assert failure.gate == "add"
        assert failure.gate_index == 0
        assert failure.constraint_index == 0
        assert failure.region == RegionLocation(3, "step 5/row 5", 0)
        assert "Constraint 0 in gate 0 ('add') is not satisfied in Region 3 ('step 5/row 5')" in str(failure)
        assert ("advice[2] (row 3)", "9") in failure.cell_values

        # the wrong value propagates to the output, which no longer matches 55
        assert len(result.copy_failures) == 1
        assert set(result.copy_failures[0].distinct_values) == {55, 60}
        assert result.incomplete == []

    def test_tampered_term_with_matching_output(self) -> None:
        result = check(4, TamperedColumns(1, 1), [[60]])
        assert [f.row for f in result.gate_failures] == [3]
        assert result.copy_failures == []

    def test_wrong_public_input_is_copy_failure_only(self) -> None:
        result = check(4, FibonacciColumnsCircuit(1, 1), [[56]])
        assert result.status is CheckStatus.UNSATISFIED
        assert result.gate_failures == []
        assert len(result.copy_failures) == 1

        failure = result.copy_failures[0]
        prover = MockProver.run(4, FibonacciColumnsCircuit(1, 1), [[56]])
        col_c = prover.cs.columns(ColumnKind.ADVICE)[2]
        instance = prover.cs.columns(ColumnKind.INSTANCE)[0]
        assert set(failure.cells) == {Cell(col_c, 7), Cell(instance, 0)}
        assert dict(failure.values) == {Cell(col_c, 7): 55, Cell(instance, 0): 56}

    def test_without_witnesses_is_incomplete(self) -> None:
        result = check(4, FibonacciColumnsCircuit(1, 1).without_witnesses(), [[55]])
        assert result.status is CheckStatus.UNSATISFIED
        assert result.gate_failures == []
        assert result.copy_failures == []

        gate_side = [f for f in result.incomplete if f.gate is not None]
        copy_side = [f for f in result.incomplete if f.gate is None]
        assert len(gate_side) == 8 * 3
        assert all(f.gate == "add" for f in gate_side)
        assert copy_side

    def test_other_field(self) -> None:
        config = MockProverConfig(field=PALLAS)
        prover = MockProver.run(4, FibonacciColumnsCircuit(1, 1), [[55]], config)
        assert prover.field is PALLAS
        assert prover.verify().is_satisfied


class TestFibonacciRotation:
    """Single-column Fibonacci over the Pallas base field."""

    def test_honest_witness_satisfied(self) -> None:
        prover = MockProver.run(5, FibonacciRotationCircuit(1, 1), [[55]])
        assert prover.field is PALLAS
        prover.assert_satisfied()

    def test_selector_rows(self) -> None:
        prover = MockProver.run(5, FibonacciRotationCircuit(1, 1), [[55]])
        selector = prover.cs.columns(ColumnKind.SELECTOR)[0]
        assert list(prover.selectors[selector].nonzero()[0]) == list(range(8))
        assert len(prover.regions) == 1
        assert prover.regions[0].height == 10

    def test_no_wrap_needed(self) -> None:
        config = MockProverConfig(wrap_rotations=False)
        assert check(4, FibonacciRotationCircuit(1, 1), [[55]], config).is_satisfied

    def test_tampered_term(self) -> None:
        result = check(5, TamperedRotation(1, 1), [[55]])
        assert [f.row for f in result.gate_failures] == [3]
        assert result.gate_failures[0].region == RegionLocation(0, "whole column/whole column", 3)
        assert len(result.copy_failures) == 1

    def test_wrong_public_input(self) -> None:
        result = check(5, FibonacciRotationCircuit(1, 1), [[56]])
        assert result.gate_failures == []
        assert len(result.copy_failures) == 1

    def test_shortest_sequence(self) -> None:
        circuit = FibonacciRotationCircuit(2, 3, n_terms=3)
        assert check(2, circuit, [[5]]).is_satisfied

    def test_too_small(self) -> None:
        result = check(3, FibonacciRotationCircuit(1, 1), [[55]])
        assert result.status is CheckStatus.SETUP_ERROR
        assert result.setup_error.reason is SetupErrorReason.CIRCUIT_TOO_LARGE


# --- Determinism ---

def test_verify_is_idempotent() -> None:
    """Verifying the same grid twice gives identical results."""
    prover = MockProver.run(4, TamperedColumns(1, 1), [[55]])
    assert prover.verify() == prover.verify()


def test_check_is_repeatable() -> None:
    """Separate checks of the same circuit agree."""
    circuit = TamperedRotation(1, 1)
    assert check(5, circuit, [[55]]) == check(5, circuit, [[55]])


# --- Setup errors ---

class TestSetupErrors:
    """Structural problems abort before any evaluation."""

    def test_circuit_too_large(self) -> None:
        with pytest.raises(SetupError) as exc_info:
            MockProver.run(2, FibonacciColumnsCircuit(1, 1), [[55]])
        assert exc_info.value.reason is SetupErrorReason.CIRCUIT_TOO_LARGE

        result = check(2, FibonacciColumnsCircuit(1, 1), [[55]])
        assert result.status is CheckStatus.SETUP_ERROR
        assert result.gate_failures == [] and result.copy_failures == []
        assert str(result).startswith("Setup error: circuit too large")

    @pytest.mark.parametrize("k", [0, -1, True, 2.5])
    def test_invalid_k(self, k) -> None:
        result = check(k, FibonacciColumnsCircuit(1, 1), [[55]])
        assert result.status is CheckStatus.SETUP_ERROR
        assert result.setup_error.reason is SetupErrorReason.INVALID_K

    def test_instance_column_count(self) -> None:
        result = check(4, FibonacciColumnsCircuit(1, 1), [])
        assert result.setup_error.reason is SetupErrorReason.INVALID_INSTANCES

    def test_too_many_public_inputs(self) -> None:
        result = check(1, PublicSquare(9), [[3, 0, 0]])
        assert result.setup_error.reason is SetupErrorReason.CIRCUIT_TOO_LARGE


# --- Rotations ---

class TestRotations:
    """Rotated queries wrap modulo n unless wrapping is turned off."""

    def test_wrap_reads_first_row(self) -> None:
        circuit = ConstantColumn([7, 7, 7, 7], enabled=[0, 1, 2, 3])
        assert check(2, circuit, []).is_satisfied

    def test_wrap_off_is_setup_error(self) -> None:
        circuit = ConstantColumn([7, 7, 7, 7], enabled=[0, 1, 2, 3])
        config = MockProverConfig(wrap_rotations=False)
        with pytest.raises(SetupError) as exc_info:
            MockProver.run(2, circuit, [], config)
        assert exc_info.value.reason is SetupErrorReason.ROW_OUT_OF_BOUNDS

    def test_wrap_off_in_range(self) -> None:
        circuit = ConstantColumn([7, 7, 7, 7], enabled=[0, 1, 2])
        config = MockProverConfig(wrap_rotations=False)
        assert check(2, circuit, [], config).is_satisfied

    def test_wrapped_value_mismatch(self) -> None:
        circuit = ConstantColumn([7, 7, 7, 8], enabled=[3])
        result = check(2, circuit, [])
        assert [f.row for f in result.gate_failures] == [3]
        values = dict(result.gate_failures[0].cell_values)
        assert values["advice[0][+1] (row 0)"] == "7"
        assert values["advice[0] (row 3)"] == "8"


# --- Selectors, fixed columns, public inputs ---

def test_disabled_rows_impose_nothing() -> None:
    """Rows where the selector is off are never checked."""
    circuit = ConstantColumn([7, 7, 9, 9], enabled=[0, 2])
    assert check(2, circuit, []).is_satisfied

    circuit = ConstantColumn([7, 7, 9, 9], enabled=[1])
    result = check(2, circuit, [])
    assert [f.row for f in result.gate_failures] == [1]


class TestPartialWitness:
    """Unknown cells only excuse the polynomials that read them."""

    def test_other_polynomial_still_checked(self) -> None:
        result = check(2, TwoConstraints(1, 2, Value.unknown()), [])
        assert result.status is CheckStatus.UNSATISFIED

        assert len(result.gate_failures) == 1
        failure = result.gate_failures[0]
        assert (failure.gate, failure.constraint_index, failure.row) == ("pair", 0, 0)

        assert len(result.incomplete) == 1
        missing = result.incomplete[0]
        assert missing.cell.column.index == 2
        assert missing.cell.row == 0
        assert missing.gate == "pair"

    def test_known_polynomials_pass(self) -> None:
        result = check(2, TwoConstraints(5, 5, Value.unknown()), [])
        assert result.gate_failures == []
        assert len(result.incomplete) == 1

    def test_fully_known(self) -> None:
        assert check(2, TwoConstraints(5, 5, 1), []).is_satisfied
        result = check(2, TwoConstraints(5, 5, 2), [])
        assert [(f.constraint_index, f.row) for f in result.gate_failures] == [(1, 0)]

    def test_cell_reported_once_per_gate(self) -> None:
        """A cell read from several enabled rows through rotations appears once."""
        result = check(5, FibonacciRotationCircuit(1, 1).without_witnesses(), [[55]])
        gate_side = [f for f in result.incomplete if f.gate is not None]
        cells = [f.cell for f in gate_side]
        assert len(cells) == len(set(cells)) == 10
        assert [cell.row for cell in cells] == list(range(10))


def test_synthesis_error_propagates() -> None:
    """A circuit evaluating an unknown value fails loudly instead of becoming a result."""
    with pytest.raises(SynthesisError):
        check(2, EagerWitness(), [])


def test_unknown_cell_is_not_assigned_failure() -> None:
    """A gate reading an unknown cell reports it instead of treating it as zero."""
    circuit = ConstantColumn([7, Value.unknown(), 7, 7], enabled=[0])
    result = check(2, circuit, [])
    assert result.status is CheckStatus.UNSATISFIED
    assert result.gate_failures == []
    assert len(result.incomplete) == 1
    missing = result.incomplete[0]
    assert isinstance(missing, CellNotAssigned)
    assert missing.cell.row == 1
    assert missing.gate == "constant"
    assert missing.region == RegionLocation(0, "column", 1)


def test_negative_values_wrap() -> None:
    """Negative witness values are reduced modulo p."""
    circuit = ConstantColumn([-1, FF(FF.order - 1), -1, -1], enabled=[0, 1, 2, 3])
    assert check(2, circuit, []).is_satisfied


class TestPublicSquare:
    """Fixed constants and advice loaded from the instance column."""

    def test_satisfied(self) -> None:
        prover = MockProver.run(2, PublicSquare(9), [[3]])
        prover.assert_satisfied()
        advice = prover.cs.columns(ColumnKind.ADVICE)[0]
        assert prover.cell_value(Cell(advice, 0)) == 3

    def test_wrong_constant(self) -> None:
        result = check(2, PublicSquare(10), [[3]])
        assert [f.row for f in result.gate_failures] == [0]
        failure = result.gate_failures[0]
        assert failure.constraint_name == "x^2 = c"
        assert "Constraint 0 ('x^2 = c') in gate 0 ('square')" in str(failure)
        assert result.copy_failures == []

    def test_assert_satisfied_raises(self) -> None:
        prover = MockProver.run(2, PublicSquare(10), [[3]])
        with pytest.raises(AssertionError, match="not satisfied"):
            prover.assert_satisfied()

    def test_degree(self) -> None:
        prover = MockProver.run(2, PublicSquare(9), [[3]])
        assert prover.cs.degree() == 3


# --- Copy constraints ---

class TestCopyChain:
    """Copy constraints are transitive."""

    def test_equal_values_satisfied(self) -> None:
        assert check(2, CopyChain(4, 4, 4), []).is_satisfied

    def test_conflict_reported_once_for_whole_component(self) -> None:
        result = check(2, CopyChain(1, 1, 2), [])
        assert result.status is CheckStatus.UNSATISFIED
        assert len(result.copy_failures) == 1
        failure = result.copy_failures[0]
        assert len(failure.cells) == 3
        assert [cell.row for cell in failure.cells] == [0, 1, 2]
        assert failure.distinct_values == (1, 2)

    def test_unknown_member(self) -> None:
        result = check(2, CopyChain(1, Value.unknown(), 1), [])
        assert result.copy_failures == []
        assert len(result.incomplete) == 1
        assert result.incomplete[0].gate is None
        assert result.incomplete[0].cell.row == 1


def test_logging(caplog) -> None:
    """The checker logs a one-line summary."""
    caplog.set_level(logging.INFO, logger="dev.mock_prover")
    check(4, FibonacciColumnsCircuit(1, 1), [[55]])
    assert "check satisfied" in caplog.text
