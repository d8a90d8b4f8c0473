"""
Per-pair acceptable price range, in micro-units of the quote currency
(1 unit = 1e-6 USD).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence

from .core.errors import BoundsViolation

if TYPE_CHECKING:
    from .pairs import TradingPair

logger = logging.getLogger(__name__)

MICRO_UNITS = 1_000_000


@dataclass(frozen=True)
class PriceBounds:
    """Inclusive [min_micro, max_micro] window for an accepted price."""

    min_micro: int
    max_micro: int

    def __post_init__(self) -> None:
        if self.min_micro < 1:
            raise ValueError(f"min_micro must be >= 1, got {self.min_micro}")
        if self.min_micro >= self.max_micro:
            raise ValueError(
                f"min_micro must be < max_micro, got ({self.min_micro}, {self.max_micro})"
            )

    def contains(self, price_micro: int) -> bool:
        return self.min_micro <= price_micro <= self.max_micro

    def as_tuple(self) -> tuple[int, int]:
        return (self.min_micro, self.max_micro)

    @classmethod
    def from_sequence(cls, value: Sequence[int]) -> "PriceBounds":
        if len(value) != 2:
            raise ValueError(f"bounds must be a [min, max] pair, got {value!r}")
        return cls(int(value[0]), int(value[1]))


def check_bounds(price_micro: int, bounds: PriceBounds) -> int:
    """Return price_micro unchanged if inside bounds, else raise BoundsViolation."""
    if not bounds.contains(price_micro):
        logger.error(
            "Price out of bounds: %d (min: %d, max: %d)",
            price_micro,
            bounds.min_micro,
            bounds.max_micro,
        )
        raise BoundsViolation(price_micro, bounds)
    return price_micro


def to_micro(price: float) -> int:
    """Float quote price -> integer micro-units, truncating toward zero."""
    return int(price * MICRO_UNITS)


def resolve_bounds(pair: TradingPair, overrides: Optional[Mapping[str, Any]] = None) -> PriceBounds:
    """
    Bounds for pair: an override keyed by the pair's display string wins,
    otherwise the catalog default.
    """
    if overrides:
        raw = overrides.get(pair.display)
        if raw is not None:
            if isinstance(raw, PriceBounds):
                return raw
            if isinstance(raw, Mapping):
                return PriceBounds(int(raw["min"]), int(raw["max"]))
            return PriceBounds.from_sequence(raw)
    return pair.bounds


__all__ = ["MICRO_UNITS", "PriceBounds", "check_bounds", "resolve_bounds", "to_micro"]
