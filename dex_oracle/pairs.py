"""
Trading pair catalog: canonical display strings, 32-byte storage hashes and
default price bounds.

The hash is BLAKE2b-256 over the UTF-8 display string, so a pair maps to the
same storage key in every process.
"""

from __future__ import annotations

import enum
import hashlib

from .bounds import PriceBounds

PAIR_HASH_SIZE = 32


class TradingPair(enum.Enum):
    """Closed set of priced pairs. Value is the canonical display string."""

    ETH_USD = "ETH/USD"
    BTC_USD = "BTC/USD"
    SOL_USD = "SOL/USD"
    AVAX_USD = "AVAX/USD"

    @property
    def display(self) -> str:
        return self.value

    @property
    def hash(self) -> bytes:
        return hashlib.blake2b(self.value.encode("utf-8"), digest_size=PAIR_HASH_SIZE).digest()

    @property
    def bounds(self) -> PriceBounds:
        return _DEFAULT_BOUNDS[self]

    @classmethod
    def parse(cls, text: str) -> "TradingPair":
        """Parse 'ETH/USD', 'eth/usd' or 'ETH_USD'."""
        norm = text.strip().upper().replace("_", "/").replace("-", "/")
        for pair in cls:
            if pair.value == norm:
                return pair
        raise ValueError(f"Unknown trading pair '{text}'. Available: {[p.value for p in cls]}")


_DEFAULT_BOUNDS = {
    TradingPair.ETH_USD: PriceBounds(1_000_000_000, 20_000_000_000),  # $1,000 - $20,000
    TradingPair.BTC_USD: PriceBounds(20_000_000_000, 200_000_000_000),  # $20,000 - $200,000
    TradingPair.SOL_USD: PriceBounds(10_000_000, 1_000_000_000),  # $10 - $1,000
    TradingPair.AVAX_USD: PriceBounds(5_000_000, 200_000_000),  # $5 - $200
}


def bounds_for(pair: TradingPair) -> PriceBounds:
    return pair.bounds


def hash_of(pair: TradingPair) -> bytes:
    return pair.hash


def display(pair: TradingPair) -> str:
    return pair.display


__all__ = ["PAIR_HASH_SIZE", "TradingPair", "bounds_for", "hash_of", "display"]
