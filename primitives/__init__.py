"""Primitives - Field types shared by the constraint system and the checker."""

from primitives.field import (
    BN254_SCALAR_PRIME,
    FF,
    PALLAS,
    PALLAS_PRIME,
    field_repr,
    to_field,
)

__all__ = [
    # Field
    "FF",
    "PALLAS",
    "BN254_SCALAR_PRIME",
    "PALLAS_PRIME",
    "to_field",
    "field_repr",
]
