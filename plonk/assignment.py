"""Backend interface the Layouter writes a witness through.

The same circuit synthesis code drives different backends:

    MockProver (dev/mock_prover.py)   records values on a bounded 2^k-row grid
    LayoutRecorder (dev/layout.py)    records only the shape, no row limit

All rows passed to an Assignment are absolute; the Layouter maps region-local
offsets before calling in.
"""

from abc import ABC, abstractmethod

from plonk.columns import Cell, Column
from plonk.value import Value


class Assignment(ABC):
    """Sink for the cells, selectors and copy constraints of one synthesis pass."""

    def enter_region(self, name: str, start: int) -> None:
        """Called when the layouter opens a region starting at absolute row `start`."""
        pass

    def exit_region(self) -> None:
        """Called when the current region closes."""
        pass

    @abstractmethod
    def enable_selector(self, label: str, selector: Column, row: int) -> None:
        """Turn `selector` on at `row`."""
        pass

    @abstractmethod
    def assign_advice(self, label: str, column: Column, row: int, value: Value) -> Value:
        """Store `value` in an advice cell.

        Returns:
            The value as stored (converted to the backend's field when known)
        """
        pass

    @abstractmethod
    def assign_fixed(self, label: str, column: Column, row: int, value: Value) -> Value:
        """Store `value` in a fixed cell and return it as stored."""
        pass

    @abstractmethod
    def query_instance(self, column: Column, row: int) -> Value:
        """Return the public input bound to (column, row), unknown if not available."""
        pass

    @abstractmethod
    def copy(self, left: Cell, right: Cell) -> None:
        """Record a copy constraint between two absolute cells."""
        pass
