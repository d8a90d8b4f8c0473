"""
Shared exception types for dex_oracle.

Every failure of a single price fetch is raised as one of these. Callers that
drive many fetches catch OracleError per call and carry on with the rest.
"""

from __future__ import annotations

from typing import Any, Optional


class OracleError(Exception):
    """Base exception for dex_oracle; catch this for any package-raised error."""

    kind = "OracleError"


class UnsupportedPair(OracleError):
    """No pool is configured for this exchange/pair. Raised before any network call."""

    kind = "UnsupportedPair"


class TransportError(OracleError):
    """Connection failure or non-200 HTTP status from the RPC endpoint."""

    kind = "TransportError"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DeadlineReached(OracleError):
    """The call did not complete before its deadline."""

    kind = "DeadlineReached"


class MalformedEnvelope(OracleError):
    """Body is not UTF-8, has no usable string "result" field, or is not valid hex."""

    kind = "MalformedEnvelope"


class MalformedData(OracleError):
    """Decoded payload is too short or holds a zero price/reserve."""

    kind = "MalformedData"


class OutOfRange(OracleError):
    """No price candidate fell inside the protocol's sanity window."""

    kind = "OutOfRange"


class BoundsViolation(OracleError):
    """Computed price lies outside the pair's configured bounds."""

    kind = "BoundsViolation"

    def __init__(self, price_micro: int, bounds: Any) -> None:
        super().__init__(
            f"price {price_micro} outside bounds "
            f"(min: {bounds.min_micro}, max: {bounds.max_micro})"
        )
        self.price_micro = price_micro
        self.bounds = bounds


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
