"""Errors raised while configuring, synthesizing or checking a circuit.

Only structural problems are exceptions. Constraint violations and missing
witness values are reported as data by the mock checker (see dev/failure.py).
"""

from enum import Enum


class SetupErrorReason(Enum):
    """Why a circuit could not be laid out or checked."""
    CIRCUIT_TOO_LARGE = "circuit too large"
    ROW_OUT_OF_BOUNDS = "row out of bounds"
    COLUMN_NOT_IN_SYSTEM = "column not in constraint system"
    COLUMN_NOT_EQUALITY_ENABLED = "column not equality-enabled"
    NOT_A_SELECTOR = "not a selector"
    INVALID_COLUMN = "invalid column"
    DUPLICATE_GATE = "duplicate gate"
    EMPTY_GATE = "empty gate"
    INVALID_INSTANCES = "invalid instances"
    INVALID_K = "invalid k"
    REGION_CLOSED = "region closed"
    NESTED_REGION = "nested region"


class PlonkError(Exception):
    """Base class for constraint-system errors."""


class SetupError(PlonkError):
    """Fatal structural error; aborts a check before any constraint is evaluated.

    Attributes:
        reason: SetupErrorReason tag callers can branch on
        message: Human-readable detail
    """

    def __init__(self, reason: SetupErrorReason, message: str = ""):
        self.reason = reason
        self.message = message
        super().__init__(f"{reason.value}: {message}" if message else reason.value)


class SynthesisError(PlonkError):
    """A circuit could not compute a witness value it needed during synthesis."""
