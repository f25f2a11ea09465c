"""Fibonacci down a single advice column, using rotations.

    advice | selector
      a    |    s
      b    |
      c    |

Gate "add" checks a(cur) + a(next) = a(cur + 2). One region holds every term;
the selector is on for each row that still has two rows below it.
"""

from dataclasses import dataclass

from plonk.columns import Column, Rotation
from plonk.constraint_system import ConstraintSystem
from plonk.layouter import AssignedCell, Layouter, Region
from primitives.field import PALLAS
from .base import FibonacciCircuit


@dataclass
class FiboRotationConfig:
    advice: Column
    selector: Column
    instance: Column


class FiboRotationChip:
    """Gate and region assignment for the single-column layout."""

    def __init__(self, config: FiboRotationConfig):
        self.config = config

    @staticmethod
    def configure(cs: ConstraintSystem, instance: Column) -> FiboRotationConfig:
        advice = cs.advice_column()
        selector = cs.selector()

        cs.enable_equality(advice)
        cs.enable_equality(instance)

        a = cs.query_advice(advice, Rotation.cur())
        b = cs.query_advice(advice, Rotation.next())
        c = cs.query_advice(advice, Rotation(2))
        s = cs.query_selector(selector)
        cs.create_gate("add", selector, [s * (a + b - c)])

        return FiboRotationConfig(advice, selector, instance)

    def assign_column(self, layouter: Layouter, circuit: FibonacciCircuit) -> AssignedCell:
        """Assign all `circuit.n_terms` terms; return the cell holding the last one."""
        config = self.config
        nrows = circuit.n_terms

        def whole_column(region: Region):
            for row in range(nrows - 2):
                region.enable(config.selector, row)

            a_cell = region.assign_advice("a", config.advice, 0, circuit.a)
            b_cell = region.assign_advice("b", config.advice, 1, circuit.b)

            for row in range(2, nrows):
                c_val = circuit.next_term(row, a_cell.value, b_cell.value)
                c_cell = region.assign_advice("c", config.advice, row, c_val)
                a_cell, b_cell = b_cell, c_cell

            return b_cell

        return layouter.assign_region("whole column", whole_column)

    def expose_public(self, layouter: Layouter, cell: AssignedCell, row: int) -> None:
        layouter.constrain_instance(cell, self.config.instance, row)


class FibonacciRotationCircuit(FibonacciCircuit):
    """Single-column Fibonacci circuit over the Pallas base field (k = 5)."""

    FIELD = PALLAS
    K = 5

    @classmethod
    def configure(cls, cs: ConstraintSystem) -> FiboRotationConfig:
        instance = cs.instance_column()
        return FiboRotationChip.configure(cs, instance)

    def synthesize(self, config: FiboRotationConfig, layouter: Layouter) -> None:
        chip = FiboRotationChip(config)
        out = chip.assign_column(layouter.namespace("whole column"), self)
        chip.expose_public(layouter.namespace("out"), out, 0)
