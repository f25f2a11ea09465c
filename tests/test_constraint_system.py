"""Tests for the column registry, equality set and gate registration."""

import pytest

from plonk.columns import Column, ColumnKind, Rotation
from plonk.constraint_system import ConstraintSystem
from plonk.errors import SetupError, SetupErrorReason
from plonk.expressions import AdviceQuery


@pytest.fixture
def cs():
    return ConstraintSystem()


class TestColumnRegistry:
    """Columns are numbered per kind in creation order."""

    def test_indices_per_kind(self, cs) -> None:
        a0 = cs.advice_column()
        f0 = cs.fixed_column()
        a1 = cs.advice_column()
        i0 = cs.instance_column()
        s0 = cs.selector()
        assert (a0.index, a1.index, f0.index, i0.index, s0.index) == (0, 1, 0, 0, 0)
        assert a1.kind is ColumnKind.ADVICE
        assert cs.columns(ColumnKind.ADVICE) == (a0, a1)

    def test_counts(self, cs) -> None:
        cs.advice_column()
        cs.advice_column()
        cs.instance_column()
        cs.selector()
        assert cs.num_advice_columns == 2
        assert cs.num_fixed_columns == 0
        assert cs.num_instance_columns == 1
        assert cs.num_selectors == 1

    def test_foreign_column_rejected(self, cs) -> None:
        cs.advice_column()
        with pytest.raises(SetupError) as exc_info:
            cs.require_column(Column(ColumnKind.ADVICE, 3))
        assert exc_info.value.reason is SetupErrorReason.COLUMN_NOT_IN_SYSTEM


class TestEquality:
    """Equality-enabled column set."""

    def test_enable_is_idempotent(self, cs) -> None:
        advice = cs.advice_column()
        cs.enable_equality(advice)
        cs.enable_equality(advice)
        assert cs.equality_columns == (advice,)
        assert cs.is_equality_enabled(advice)

    def test_not_enabled_by_default(self, cs) -> None:
        advice = cs.advice_column()
        assert not cs.is_equality_enabled(advice)

    def test_selector_cannot_be_enabled(self, cs) -> None:
        selector = cs.selector()
        with pytest.raises(SetupError) as exc_info:
            cs.enable_equality(selector)
        assert exc_info.value.reason is SetupErrorReason.INVALID_COLUMN

    def test_unknown_column_rejected(self, cs) -> None:
        with pytest.raises(SetupError) as exc_info:
            cs.enable_equality(Column(ColumnKind.INSTANCE, 0))
        assert exc_info.value.reason is SetupErrorReason.COLUMN_NOT_IN_SYSTEM


class TestQueries:
    """Query builders check the column kind."""

    def test_query_kinds(self, cs) -> None:
        advice = cs.advice_column()
        fixed = cs.fixed_column()
        selector = cs.selector()
        assert cs.query_advice(advice, Rotation.next()).rotation == Rotation(1)
        assert cs.query_fixed(fixed).rotation == Rotation(0)
        assert cs.query_selector(selector).column == selector

    def test_wrong_kind(self, cs) -> None:
        advice = cs.advice_column()
        fixed = cs.fixed_column()
        with pytest.raises(SetupError) as exc_info:
            cs.query_advice(fixed)
        assert exc_info.value.reason is SetupErrorReason.INVALID_COLUMN
        with pytest.raises(SetupError) as exc_info:
            cs.query_selector(advice)
        assert exc_info.value.reason is SetupErrorReason.NOT_A_SELECTOR


class TestGates:
    """Gate registration and validation."""

    def test_create_gate(self, cs) -> None:
        a = cs.advice_column()
        b = cs.advice_column()
        s = cs.selector()
        qa, qb, qs = cs.query_advice(a), cs.query_advice(b), cs.query_selector(s)
        gate = cs.create_gate("eq", s, [qs * (qa - qb), ("bool", qs * qa * (1 - qa))])
        assert cs.gates == [gate]
        assert gate.constraint_names == ("", "bool")
        assert gate.degree() == 3
        assert cs.degree() == 3

    def test_degree_defaults_to_one(self, cs) -> None:
        assert cs.degree() == 1

    def test_duplicate_name(self, cs) -> None:
        a = cs.advice_column()
        s = cs.selector()
        cs.create_gate("g", s, [cs.query_advice(a)])
        with pytest.raises(SetupError) as exc_info:
            cs.create_gate("g", s, [cs.query_advice(a)])
        assert exc_info.value.reason is SetupErrorReason.DUPLICATE_GATE

    def test_empty_gate(self, cs) -> None:
        s = cs.selector()
        with pytest.raises(SetupError) as exc_info:
            cs.create_gate("g", s, [])
        assert exc_info.value.reason is SetupErrorReason.EMPTY_GATE

    def test_guard_must_be_selector(self, cs) -> None:
        a = cs.advice_column()
        with pytest.raises(SetupError) as exc_info:
            cs.create_gate("g", a, [cs.query_advice(a)])
        assert exc_info.value.reason is SetupErrorReason.NOT_A_SELECTOR

    def test_foreign_query_rejected(self, cs) -> None:
        s = cs.selector()
        stray = AdviceQuery(Column(ColumnKind.ADVICE, 0))
        with pytest.raises(SetupError) as exc_info:
            cs.create_gate("g", s, [stray])
        assert exc_info.value.reason is SetupErrorReason.COLUMN_NOT_IN_SYSTEM
        assert cs.gates == []

    def test_non_expression_rejected(self, cs) -> None:
        s = cs.selector()
        with pytest.raises(TypeError):
            cs.create_gate("g", s, [0])


def test_setup_error_str() -> None:
    """SetupError carries the reason tag and a readable message."""
    err = SetupError(SetupErrorReason.INVALID_K, "k must be positive")
    assert err.reason is SetupErrorReason.INVALID_K
    assert str(err) == "invalid k: k must be positive"
    assert str(SetupError(SetupErrorReason.EMPTY_GATE)) == "empty gate"
