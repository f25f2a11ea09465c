"""Dev - Mock prover and layout tooling for checking circuits without proofs."""

from dev.failure import (
    CellNotAssigned,
    CheckResult,
    CheckStatus,
    ConstraintNotSatisfied,
    CopyConstraintViolated,
    RegionLocation,
)
from dev.layout import CircuitLayout, LayoutRecorder, RegionShape
from dev.mock_prover import MockProver, MockProverConfig, check

__all__ = [
    # Mock prover
    "MockProver",
    "MockProverConfig",
    "check",
    # Results
    "CheckResult",
    "CheckStatus",
    "ConstraintNotSatisfied",
    "CopyConstraintViolated",
    "CellNotAssigned",
    "RegionLocation",
    # Layout
    "CircuitLayout",
    "LayoutRecorder",
    "RegionShape",
]
