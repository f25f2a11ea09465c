"""Plonk - PLONKish constraint system: columns, gates, regions and copy constraints."""

from plonk.assignment import Assignment
from plonk.circuit import Circuit
from plonk.columns import Cell, Column, ColumnKind, Rotation
from plonk.constraint_system import ConstraintSystem, Gate
from plonk.errors import PlonkError, SetupError, SetupErrorReason, SynthesisError
from plonk.expressions import (
    AdviceQuery,
    Constant,
    EvaluationContext,
    Expression,
    FixedQuery,
    InstanceQuery,
    Negated,
    Product,
    SelectorQuery,
    Sum,
)
from plonk.layouter import AssignedCell, Layouter, Region, RegionRecord
from plonk.permutation import Permutation
from plonk.value import Value

__all__ = [
    # Data model
    "Cell",
    "Column",
    "ColumnKind",
    "Rotation",
    "Value",
    # Expressions
    "Expression",
    "EvaluationContext",
    "Constant",
    "AdviceQuery",
    "FixedQuery",
    "InstanceQuery",
    "SelectorQuery",
    "Negated",
    "Sum",
    "Product",
    # Constraint system
    "ConstraintSystem",
    "Gate",
    "Permutation",
    # Layout
    "Assignment",
    "Layouter",
    "Region",
    "RegionRecord",
    "AssignedCell",
    # Circuits
    "Circuit",
    # Errors
    "PlonkError",
    "SetupError",
    "SetupErrorReason",
    "SynthesisError",
]
