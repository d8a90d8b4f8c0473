"""
Stable facade: shared error types. Do not add exports without updating __all__.
"""

from __future__ import annotations

from .errors import (
    BoundsViolation,
    DeadlineReached,
    MalformedData,
    MalformedEnvelope,
    OracleError,
    OutOfRange,
    TransportError,
    UnsupportedPair,
)

__all__ = [
    "OracleError",
    "UnsupportedPair",
    "TransportError",
    "DeadlineReached",
    "MalformedEnvelope",
    "MalformedData",
    "OutOfRange",
    "BoundsViolation",
]
