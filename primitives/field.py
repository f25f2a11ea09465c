"""Prime fields for PLONKish circuits.

Uses galois library for all field arithmetic. FF and PALLAS are the field types.

Both fields are constructed with their known multiplicative generator so that
galois.GF() does not have to factor p - 1 at import time (a 254-bit p - 1
takes far too long to factor on every import).
"""

import galois
import numpy as np

# --- Field Construction ---

BN254_SCALAR_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617
PALLAS_PRIME = 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001

FF = galois.GF(BN254_SCALAR_PRIME, primitive_element=5, verify=False)
"""Scalar field of BN254 (alt_bn128)."""

PALLAS = galois.GF(PALLAS_PRIME, primitive_element=5, verify=False)
"""Base field of the Pallas curve (scalar field of Vesta)."""


# --- Conversion ---

def to_field(field: type, value) -> galois.FieldArray:
    """Convert an int (possibly negative) or a field scalar into a scalar of `field`.

    Scalars from a different field are reduced through their integer
    representative.
    """
    if isinstance(value, galois.FieldArray):
        if type(value) is field:
            return value
        value = int(value)
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"Cannot convert {type(value).__name__} to {field.name}")
    return field(int(value) % field.order)


def field_repr(value) -> str:
    """Return a string for the field element using the shorter of
    its positive or negative representative.
    """
    if value is None:
        return "None"
    v = int(value)
    if v == 0:
        return "0"
    order = type(value).order if isinstance(value, galois.FieldArray) else None
    if order is None:
        return str(v)
    neg = (order - v) % order
    pos_str = str(v)
    neg_str = "-" + str(neg)
    return neg_str if len(neg_str) < len(pos_str) else pos_str
