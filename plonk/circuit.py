"""Circuit contract.

A circuit describes itself in two phases:

    configure(cs)                  allocate columns, register gates; no witness data
    synthesize(config, layouter)   one pass of region assignments placing the witness

configure() runs once per check and returns an opaque Config (typically a
dataclass of column handles) that synthesize() receives back.
"""

from abc import ABC, abstractmethod
from typing import Any

from plonk.constraint_system import ConstraintSystem
from plonk.layouter import Layouter


class Circuit(ABC):
    """Base class for circuits checked by the mock prover."""

    @classmethod
    @abstractmethod
    def configure(cls, cs: ConstraintSystem) -> Any:
        """Build columns and gates in `cs`; return the circuit's Config."""
        pass

    @abstractmethod
    def synthesize(self, config: Any, layouter: Layouter) -> None:
        """Assign the whole witness through `layouter`."""
        pass

    @abstractmethod
    def without_witnesses(self) -> "Circuit":
        """Return a structurally identical circuit whose witness values are all unknown."""
        pass
