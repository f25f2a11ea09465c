"""Column handles, rotations and cell coordinates."""

from dataclasses import dataclass
from enum import Enum


class ColumnKind(Enum):
    """What a column holds.

    ADVICE:   private witness values, assigned during synthesis
    FIXED:    circuit constants, assigned during synthesis
    INSTANCE: public inputs, bound by the caller at check time
    SELECTOR: boolean per row, switches gates on and off
    """
    ADVICE = "advice"
    FIXED = "fixed"
    INSTANCE = "instance"
    SELECTOR = "selector"


@dataclass(frozen=True)
class Column:
    """Column handle. Identity is (kind, index); indices are per kind."""
    kind: ColumnKind
    index: int

    @property
    def is_selector(self) -> bool:
        return self.kind is ColumnKind.SELECTOR

    def __str__(self) -> str:
        return f"{self.kind.value}[{self.index}]"


@dataclass(frozen=True)
class Rotation:
    """Row offset relative to the row a gate is being checked at."""
    offset: int = 0

    @classmethod
    def cur(cls) -> "Rotation":
        return cls(0)

    @classmethod
    def next(cls) -> "Rotation":
        return cls(1)

    @classmethod
    def prev(cls) -> "Rotation":
        return cls(-1)

    def __str__(self) -> str:
        return str(self.offset)


@dataclass(frozen=True)
class Cell:
    """Absolute cell coordinate. A Cell is a location, not a value."""
    column: Column
    row: int

    def __str__(self) -> str:
        return f"{self.column}@{self.row}"
