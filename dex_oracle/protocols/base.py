"""
DEX protocol interface and shared decoding helpers.

A protocol adapter is chain-agnostic: it builds the call data for a pool read
and turns the raw response bytes into a float price (quote per base). All
ratio arithmetic is done on exact integers and converted to float with one
correctly rounded division.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from ..core.errors import MalformedData
from ..pairs import TradingPair

WORD_BYTES = 32
Q96 = 1 << 96


class ProtocolFamily(enum.Enum):
    CONSTANT_PRODUCT = "constant_product"
    CONCENTRATED_LIQUIDITY = "concentrated_liquidity"


@dataclass(frozen=True)
class SanityWindow:
    """Open interval (low, high) a decoded price must fall in."""

    low: float
    high: float

    def __post_init__(self) -> None:
        if not self.low < self.high:
            raise ValueError(f"sanity window low must be < high, got ({self.low}, {self.high})")

    def contains(self, price: float) -> bool:
        return self.low < price < self.high


# Reference ETH/USD deployment
ETH_USD_WINDOW = SanityWindow(1000.0, 20000.0)


@dataclass(frozen=True)
class PoolLayout:
    """
    Explicit token order and decimals of a pool.

    base_is_token0=False means token1 is the priced asset and token0 the quote
    (e.g. a USDC/WETH pool priced in USDC).
    """

    token0_decimals: int
    token1_decimals: int
    base_is_token0: bool = False


# USDC (6 decimals) as token0, WETH (18 decimals) as token1
USDC_WETH_LAYOUT = PoolLayout(token0_decimals=6, token1_decimals=18, base_is_token0=False)


def read_word(data: bytes, index: int) -> int:
    """Big-endian uint256 at 32-byte word `index`."""
    return int.from_bytes(data[index * WORD_BYTES:(index + 1) * WORD_BYTES], "big")


def require_length(data: bytes, min_len: int, label: str) -> None:
    if len(data) < min_len:
        raise MalformedData(f"Invalid {label} response length: {len(data)} < {min_len}")


def scaled_ratio(num: int, den: int, exp10: int = 0) -> float:
    """num / den * 10**exp10, rounded once. Overflow maps to inf (never in a window)."""
    try:
        if exp10 >= 0:
            return (num * 10 ** exp10) / den
        return num / (den * 10 ** (-exp10))
    except OverflowError:
        return float("inf")


@runtime_checkable
class DexProtocol(Protocol):
    """Protocol for DEX pool adapters."""

    @property
    def protocol_name(self) -> str: ...

    @property
    def family(self) -> ProtocolFamily: ...

    def build_call_data(self, pair: TradingPair) -> bytes:
        """4-byte method selector for the price read. Independent of pair."""
        ...

    def parse_price(self, raw: bytes) -> float:
        """Decode raw call result bytes into a quote-per-base price."""
        ...


def coerce_window(window: Optional[SanityWindow], default: SanityWindow) -> SanityWindow:
    return window if window is not None else default
