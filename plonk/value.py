"""Witness values that may not be known yet.

A Value wraps a field element (known) or nothing (unknown). Circuits compute
their witness through Values so the same synthesize() code runs both with a
real witness and in shape-only mode (Circuit.without_witnesses()), where every
value is unknown and arithmetic simply propagates unknown.
"""

from typing import Any, Callable, Optional

from plonk.errors import SynthesisError

_UNKNOWN = object()


class Value:
    """Tagged optional field element."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Any = _UNKNOWN):
        self._inner = inner

    @classmethod
    def known(cls, inner: Any) -> "Value":
        if isinstance(inner, Value):
            return inner
        return cls(inner)

    @classmethod
    def unknown(cls) -> "Value":
        return cls()

    def is_known(self) -> bool:
        return self._inner is not _UNKNOWN

    def inner(self) -> Optional[Any]:
        """Return the wrapped element, or None when unknown."""
        return self._inner if self.is_known() else None

    def evaluate(self) -> Any:
        """Return the wrapped element; raises SynthesisError when unknown."""
        if not self.is_known():
            raise SynthesisError("value is unknown")
        return self._inner

    def map(self, fn: Callable[[Any], Any]) -> "Value":
        if not self.is_known():
            return self
        return Value(fn(self._inner))

    def and_then(self, fn: Callable[[Any], "Value"]) -> "Value":
        if not self.is_known():
            return self
        return fn(self._inner)

    def zip(self, other: "Value") -> "Value":
        """Pair two values; unknown if either is unknown."""
        other = _lift(other)
        if not (self.is_known() and other.is_known()):
            return Value.unknown()
        return Value((self._inner, other._inner))

    def _binary(self, other, op) -> "Value":
        other = _lift(other)
        if not (self.is_known() and other.is_known()):
            return Value.unknown()
        return Value(op(self._inner, other._inner))

    def __add__(self, other):
        return self._binary(other, lambda a, b: a + b)

    def __radd__(self, other):
        return _lift(other) + self

    def __sub__(self, other):
        return self._binary(other, lambda a, b: a - b)

    def __rsub__(self, other):
        return _lift(other) - self

    def __mul__(self, other):
        return self._binary(other, lambda a, b: a * b)

    def __rmul__(self, other):
        return _lift(other) * self

    def __neg__(self):
        return self.map(lambda a: -a)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if self.is_known() != other.is_known():
            return False
        if not self.is_known():
            return True
        return bool(self._inner == other._inner)

    def __repr__(self):
        if not self.is_known():
            return "Value(unknown)"
        return f"Value({self._inner})"


def _lift(value) -> Value:
    return value if isinstance(value, Value) else Value.known(value)
