"""Polynomial expressions over column queries.

Gates are built in two phases: first an Expression tree is built from column
queries and arithmetic, then the finished tree is handed to
ConstraintSystem.create_gate(). Trees are immutable values; nothing captures
mutable state.

Evaluation goes through an EvaluationContext, so the same tree evaluates
against whole columns (the mock checker, vectorised over every row at once)
or against a single row (failure diagnostics).

Example:
    a = cs.query_advice(col_a, Rotation.cur())
    b = cs.query_advice(col_b, Rotation.cur())
    c = cs.query_advice(col_c, Rotation.cur())
    cs.create_gate("add", selector, [a + b - c])
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, Union

import galois

from plonk.columns import Column, Rotation


class EvaluationContext(ABC):
    """Resolves the leaves of an expression tree."""

    @abstractmethod
    def constant(self, value: Any) -> Any:
        """Return `value` as an element of the evaluation field."""
        pass

    @abstractmethod
    def advice(self, column: Column, rotation: Rotation) -> Any:
        """Return the advice column at the given rotation."""
        pass

    @abstractmethod
    def fixed(self, column: Column, rotation: Rotation) -> Any:
        """Return the fixed column at the given rotation."""
        pass

    @abstractmethod
    def instance(self, column: Column, rotation: Rotation) -> Any:
        """Return the instance column at the given rotation."""
        pass

    @abstractmethod
    def selector(self, column: Column) -> Any:
        """Return the selector as 0/1 field elements."""
        pass


class Expression:
    """Node of a polynomial expression tree."""

    # Make numpy/galois scalars defer to the reflected operators below
    __array_ufunc__ = None

    def degree(self) -> int:
        raise NotImplementedError

    def queries(self) -> Iterator["Query"]:
        raise NotImplementedError

    def evaluate(self, ctx: EvaluationContext) -> Any:
        raise NotImplementedError

    def __add__(self, other):
        other = _lift(other)
        if other is None:
            return NotImplemented
        return Sum(self, other)

    def __radd__(self, other):
        other = _lift(other)
        if other is None:
            return NotImplemented
        return Sum(other, self)

    def __sub__(self, other):
        other = _lift(other)
        if other is None:
            return NotImplemented
        return Sum(self, Negated(other))

    def __rsub__(self, other):
        other = _lift(other)
        if other is None:
            return NotImplemented
        return Sum(other, Negated(self))

    def __mul__(self, other):
        other = _lift(other)
        if other is None:
            return NotImplemented
        return Product(self, other)

    def __rmul__(self, other):
        other = _lift(other)
        if other is None:
            return NotImplemented
        return Product(other, self)

    def __neg__(self):
        return Negated(self)


# --- Leaves ---

@dataclass(frozen=True, eq=False)
class Constant(Expression):
    value: Any

    def degree(self) -> int:
        return 0

    def queries(self) -> Iterator["Query"]:
        return iter(())

    def evaluate(self, ctx: EvaluationContext) -> Any:
        return ctx.constant(self.value)

    def __str__(self) -> str:
        return str(int(self.value)) if isinstance(self.value, galois.FieldArray) else str(self.value)


@dataclass(frozen=True, eq=False)
class Query(Expression):
    """Read of a column at a rotation."""
    column: Column
    rotation: Rotation = Rotation()

    def degree(self) -> int:
        return 1

    def queries(self) -> Iterator["Query"]:
        yield self

    def __str__(self) -> str:
        if self.rotation.offset == 0:
            return str(self.column)
        return f"{self.column}[{self.rotation.offset:+d}]"


class AdviceQuery(Query):
    def evaluate(self, ctx: EvaluationContext) -> Any:
        return ctx.advice(self.column, self.rotation)


class FixedQuery(Query):
    def evaluate(self, ctx: EvaluationContext) -> Any:
        return ctx.fixed(self.column, self.rotation)


class InstanceQuery(Query):
    def evaluate(self, ctx: EvaluationContext) -> Any:
        return ctx.instance(self.column, self.rotation)


class SelectorQuery(Query):
    def evaluate(self, ctx: EvaluationContext) -> Any:
        return ctx.selector(self.column)


# --- Arithmetic ---

@dataclass(frozen=True, eq=False)
class Negated(Expression):
    inner: Expression

    def degree(self) -> int:
        return self.inner.degree()

    def queries(self) -> Iterator["Query"]:
        return self.inner.queries()

    def evaluate(self, ctx: EvaluationContext) -> Any:
        return -self.inner.evaluate(ctx)

    def __str__(self) -> str:
        return f"-{self.inner}"


@dataclass(frozen=True, eq=False)
class Sum(Expression):
    left: Expression
    right: Expression

    def degree(self) -> int:
        return max(self.left.degree(), self.right.degree())

    def queries(self) -> Iterator["Query"]:
        yield from self.left.queries()
        yield from self.right.queries()

    def evaluate(self, ctx: EvaluationContext) -> Any:
        return self.left.evaluate(ctx) + self.right.evaluate(ctx)

    def __str__(self) -> str:
        if isinstance(self.right, Negated):
            return f"({self.left} - {self.right.inner})"
        return f"({self.left} + {self.right})"


@dataclass(frozen=True, eq=False)
class Product(Expression):
    left: Expression
    right: Expression

    def degree(self) -> int:
        return self.left.degree() + self.right.degree()

    def queries(self) -> Iterator["Query"]:
        yield from self.left.queries()
        yield from self.right.queries()

    def evaluate(self, ctx: EvaluationContext) -> Any:
        return self.left.evaluate(ctx) * self.right.evaluate(ctx)

    def __str__(self) -> str:
        return f"{self.left} * {self.right}"


def _lift(value: Union[Expression, int, galois.FieldArray]):
    """Wrap ints and field scalars as Constant; None for unsupported operands."""
    if isinstance(value, Expression):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int) or (isinstance(value, galois.FieldArray) and value.ndim == 0):
        return Constant(value)
    return None
