"""Concrete circuits.

Each circuit module holds a chip (gate definitions plus region assignments)
and the Circuit that drives it. CIRCUIT_REGISTRY maps the names used on the
command line to circuit classes.
"""

from .base import FibonacciCircuit, fibonacci_sequence
from .fibonacci_columns import FiboColumnsChip, FiboColumnsConfig, FibonacciColumnsCircuit
from .fibonacci_rotation import FiboRotationChip, FiboRotationConfig, FibonacciRotationCircuit

# Registry mapping circuit names to circuit classes
CIRCUIT_REGISTRY: dict[str, type[FibonacciCircuit]] = {
    "fibonacci-columns": FibonacciColumnsCircuit,
    "fibonacci-rotation": FibonacciRotationCircuit,
}


def get_circuit(name: str) -> type[FibonacciCircuit]:
    """Get circuit class by name.

    Args:
        name: Registered circuit name (e.g., 'fibonacci-columns')

    Returns:
        Circuit class

    Raises:
        KeyError: If no circuit is registered under `name`
    """
    if name in CIRCUIT_REGISTRY:
        return CIRCUIT_REGISTRY[name]
    raise KeyError(
        f"No circuit named '{name}'. "
        f"Available: {list(CIRCUIT_REGISTRY.keys())}"
    )


__all__ = [
    "FibonacciCircuit",
    "fibonacci_sequence",
    "FiboColumnsChip",
    "FiboColumnsConfig",
    "FibonacciColumnsCircuit",
    "FiboRotationChip",
    "FiboRotationConfig",
    "FibonacciRotationCircuit",
    "CIRCUIT_REGISTRY",
    "get_circuit",
]
