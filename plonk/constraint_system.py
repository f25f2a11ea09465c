"""Constraint system: columns, gates and equality-enabled columns.

A ConstraintSystem is built once by Circuit.configure() and only read after
that. It holds no witness data.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

from plonk.columns import Column, ColumnKind, Rotation
from plonk.errors import SetupError, SetupErrorReason
from plonk.expressions import (
    AdviceQuery,
    Expression,
    FixedQuery,
    InstanceQuery,
    SelectorQuery,
)

logger = logging.getLogger(__name__)

# A gate polynomial, optionally named: expr or (name, expr)
GatePoly = Union[Expression, Tuple[str, Expression]]


@dataclass(frozen=True)
class Gate:
    """Polynomials that must evaluate to zero wherever `selector` is enabled.

    Attributes:
        name: Gate name, unique within a constraint system
        selector: Selector column guarding the gate
        polys: Constraint polynomials
        constraint_names: One name per polynomial ("" when unnamed)
    """
    name: str
    selector: Column
    polys: Tuple[Expression, ...]
    constraint_names: Tuple[str, ...]

    def degree(self) -> int:
        """Maximum polynomial degree (the guard counts only where it is queried)."""
        return max(poly.degree() for poly in self.polys)


class ConstraintSystem:
    """Column registry and gate set of a circuit."""

    def __init__(self):
        self._columns: Dict[ColumnKind, List[Column]] = {kind: [] for kind in ColumnKind}
        self._equality: List[Column] = []
        self.gates: List[Gate] = []

    # --- Column registry ---

    def _new_column(self, kind: ColumnKind) -> Column:
        column = Column(kind, len(self._columns[kind]))
        self._columns[kind].append(column)
        return column

    def advice_column(self) -> Column:
        return self._new_column(ColumnKind.ADVICE)

    def fixed_column(self) -> Column:
        return self._new_column(ColumnKind.FIXED)

    def instance_column(self) -> Column:
        return self._new_column(ColumnKind.INSTANCE)

    def selector(self) -> Column:
        return self._new_column(ColumnKind.SELECTOR)

    def columns(self, kind: ColumnKind) -> Tuple[Column, ...]:
        return tuple(self._columns[kind])

    @property
    def num_advice_columns(self) -> int:
        return len(self._columns[ColumnKind.ADVICE])

    @property
    def num_fixed_columns(self) -> int:
        return len(self._columns[ColumnKind.FIXED])

    @property
    def num_instance_columns(self) -> int:
        return len(self._columns[ColumnKind.INSTANCE])

    @property
    def num_selectors(self) -> int:
        return len(self._columns[ColumnKind.SELECTOR])

    def has_column(self, column: Column) -> bool:
        return 0 <= column.index < len(self._columns[column.kind])

    def require_column(self, column: Column, kind: ColumnKind = None) -> None:
        """Raise SetupError unless `column` belongs to this system (and has `kind`)."""
        if not isinstance(column, Column) or not self.has_column(column):
            raise SetupError(SetupErrorReason.COLUMN_NOT_IN_SYSTEM, f"{column}")
        if kind is not None and column.kind is not kind:
            reason = (SetupErrorReason.NOT_A_SELECTOR if kind is ColumnKind.SELECTOR
                      else SetupErrorReason.INVALID_COLUMN)
            raise SetupError(reason, f"{column} is not a {kind.value} column")

    # --- Equality ---

    def enable_equality(self, column: Column) -> None:
        """Allow `column` to take part in copy constraints."""
        self.require_column(column)
        if column.is_selector:
            raise SetupError(SetupErrorReason.INVALID_COLUMN,
                             f"selector {column} cannot be equality-enabled")
        if column not in self._equality:
            self._equality.append(column)

    def is_equality_enabled(self, column: Column) -> bool:
        return column in self._equality

    @property
    def equality_columns(self) -> Tuple[Column, ...]:
        return tuple(self._equality)

    # --- Queries ---

    def query_advice(self, column: Column, rotation: Rotation = Rotation.cur()) -> AdviceQuery:
        self.require_column(column, ColumnKind.ADVICE)
        return AdviceQuery(column, rotation)

    def query_fixed(self, column: Column, rotation: Rotation = Rotation.cur()) -> FixedQuery:
        self.require_column(column, ColumnKind.FIXED)
        return FixedQuery(column, rotation)

    def query_instance(self, column: Column, rotation: Rotation = Rotation.cur()) -> InstanceQuery:
        self.require_column(column, ColumnKind.INSTANCE)
        return InstanceQuery(column, rotation)

    def query_selector(self, selector: Column) -> SelectorQuery:
        self.require_column(selector, ColumnKind.SELECTOR)
        return SelectorQuery(selector)

    # --- Gates ---

    def create_gate(self, name: str, selector: Column, polys: Sequence[GatePoly]) -> Gate:
        """Register a gate: every poly must vanish at each row where `selector` is on.

        Args:
            name: Unique gate name (used in diagnostics)
            selector: Selector column guarding the gate
            polys: Expressions, or (constraint_name, expression) pairs

        Returns:
            The registered Gate
        """
        self.require_column(selector, ColumnKind.SELECTOR)
        if any(gate.name == name for gate in self.gates):
            raise SetupError(SetupErrorReason.DUPLICATE_GATE, f"gate '{name}' already exists")
        if not polys:
            raise SetupError(SetupErrorReason.EMPTY_GATE, f"gate '{name}' has no constraints")

        exprs = []
        names = []
        for poly in polys:
            constraint_name = ""
            if isinstance(poly, tuple):
                constraint_name, poly = poly
            if not isinstance(poly, Expression):
                raise TypeError(f"gate '{name}': expected Expression, got {type(poly).__name__}")
            for query in poly.queries():
                self.require_column(query.column)
            exprs.append(poly)
            names.append(constraint_name)

        gate = Gate(name, selector, tuple(exprs), tuple(names))
        self.gates.append(gate)
        logger.debug("gate %r on %s: %d constraint(s), degree %d",
                     name, selector, len(exprs), gate.degree())
        return gate

    def degree(self) -> int:
        """Maximum degree over all gates (1 when there are none)."""
        return max([gate.degree() for gate in self.gates], default=1)
