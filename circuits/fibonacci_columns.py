"""Fibonacci over three advice columns, one row per step.

    col_a | col_b | col_c | selector
      a       b       c        s

Gate "add" checks a + b = c on the same row. The first region assigns
f(0), f(1), f(2); every following region copies the previous b and c into
a and b of a fresh row and assigns their sum to c. The last c is exposed as
the public output.
"""

from dataclasses import dataclass
from typing import Tuple

from plonk.columns import Column, Rotation
from plonk.constraint_system import ConstraintSystem
from plonk.layouter import AssignedCell, Layouter, Region
from plonk.value import Value
from .base import FibonacciCircuit


@dataclass
class FiboColumnsConfig:
    col_a: Column
    col_b: Column
    col_c: Column
    selector: Column
    instance: Column


class FiboColumnsChip:
    """Gate and region assignments for the three-column layout."""

    def __init__(self, config: FiboColumnsConfig):
        self.config = config

    @staticmethod
    def configure(cs: ConstraintSystem, instance: Column) -> FiboColumnsConfig:
        col_a = cs.advice_column()
        col_b = cs.advice_column()
        col_c = cs.advice_column()
        selector = cs.selector()

        cs.enable_equality(col_a)
        cs.enable_equality(col_b)
        cs.enable_equality(col_c)
        cs.enable_equality(instance)

        a = cs.query_advice(col_a, Rotation.cur())
        b = cs.query_advice(col_b, Rotation.cur())
        c = cs.query_advice(col_c, Rotation.cur())
        s = cs.query_selector(selector)
        cs.create_gate("add", selector, [s * (a + b - c)])

        return FiboColumnsConfig(col_a, col_b, col_c, selector, instance)

    def assign_first_row(
        self, layouter: Layouter, a: Value, b: Value, c: Value
    ) -> Tuple[AssignedCell, AssignedCell, AssignedCell]:
        config = self.config

        def first_row(region: Region):
            region.enable(config.selector, 0)
            a_cell = region.assign_advice("f(0)", config.col_a, 0, a)
            b_cell = region.assign_advice("f(1)", config.col_b, 0, b)
            c_cell = region.assign_advice("f(2)", config.col_c, 0, c)
            return a_cell, b_cell, c_cell

        return layouter.assign_region("first row", first_row)

    def assign_row(
        self, layouter: Layouter, prev_b: AssignedCell, prev_c: AssignedCell, c: Value, index: int
    ) -> AssignedCell:
        config = self.config

        def next_row(region: Region):
            region.enable(config.selector, 0)
            prev_b.copy_advice("a", region, config.col_a, 0)
            prev_c.copy_advice("b", region, config.col_b, 0)
            return region.assign_advice(f"f({index})", config.col_c, 0, c)

        return layouter.assign_region(f"row {index}", next_row)

    def expose_public(self, layouter: Layouter, cell: AssignedCell, row: int) -> None:
        layouter.constrain_instance(cell, self.config.instance, row)


class FibonacciColumnsCircuit(FibonacciCircuit):
    """Three-column Fibonacci circuit; 10 terms fit in 8 rows (k = 4)."""

    K = 4

    @classmethod
    def configure(cls, cs: ConstraintSystem) -> FiboColumnsConfig:
        instance = cs.instance_column()
        return FiboColumnsChip.configure(cs, instance)

    def synthesize(self, config: FiboColumnsConfig, layouter: Layouter) -> None:
        chip = FiboColumnsChip(config)

        c = self.next_term(2, self.a, self.b)
        _, prev_b, prev_c = chip.assign_first_row(layouter.namespace("first row"), self.a, self.b, c)

        for i in range(3, self.n_terms):
            c = self.next_term(i, prev_b.value, prev_c.value)
            c_cell = chip.assign_row(layouter.namespace(f"step {i}"), prev_b, prev_c, c, i)
            prev_b, prev_c = prev_c, c_cell

        chip.expose_public(layouter.namespace("out"), prev_c, 0)
