"""Shared pieces of the Fibonacci circuits."""

from typing import Any, List

from plonk.circuit import Circuit
from plonk.value import Value
from primitives.field import FF, to_field


def fibonacci_sequence(a: Any, b: Any, n: int) -> List[Any]:
    """First `n` terms of the sequence starting a, b (ints or field elements)."""
    terms = [a, b]
    while len(terms) < n:
        terms.append(terms[-2] + terms[-1])
    return terms[:n]


class FibonacciCircuit(Circuit):
    """Proves knowledge of f(0), f(1) such that f(n_terms - 1) is the public output.

    Attributes:
        a: f(0) as a Value (unknown when synthesizing shape only)
        b: f(1) as a Value
        n_terms: Number of sequence terms laid out (at least 3)
    """

    FIELD = FF
    K = 4

    def __init__(self, a: Any = None, b: Any = None, n_terms: int = 10):
        if n_terms < 3:
            raise ValueError(f"n_terms must be at least 3, got {n_terms}")
        self.a = self._witness(a)
        self.b = self._witness(b)
        self.n_terms = n_terms

    @classmethod
    def _witness(cls, value: Any) -> Value:
        if value is None:
            return Value.unknown()
        if isinstance(value, Value):
            return value.map(lambda v: to_field(cls.FIELD, v))
        return Value.known(to_field(cls.FIELD, value))

    def without_witnesses(self) -> "FibonacciCircuit":
        return type(self)(None, None, self.n_terms)

    def next_term(self, index: int, prev: Value, cur: Value) -> Value:
        """Term `index` of the sequence, from the two terms before it."""
        return prev + cur

    def public_inputs(self) -> List[List[Any]]:
        """Instance values matching the witness: [[f(n_terms - 1)]]."""
        if not (self.a.is_known() and self.b.is_known()):
            raise ValueError("public inputs need a known witness")
        terms = fibonacci_sequence(self.a.evaluate(), self.b.evaluate(), self.n_terms)
        return [[terms[-1]]]
