"""
Fake transports, protocols and exchanges for tests: canned bytes, always-fail,
call recording. No live network.
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

from dex_oracle.bounds import PriceBounds
from dex_oracle.core.errors import UnsupportedPair
from dex_oracle.exchanges.base import PricePoint
from dex_oracle.pairs import TradingPair
from dex_oracle.protocols.base import ProtocolFamily

# Deterministic timestamp for reproducible tests.
FAKE_TIMESTAMP_MS = 1_767_225_600_000


def word(value: int) -> bytes:
    """Big-endian 32-byte ABI word."""
    return value.to_bytes(32, "big")


def reserves_payload(reserve0: int, reserve1: int, block_ts: int = 1_700_000_000) -> bytes:
    """getReserves() return data: reserve0, reserve1, blockTimestampLast."""
    return word(reserve0) + word(reserve1) + word(block_ts)


def slot0_payload(sqrt_price_x96: int, extra_words: int = 6) -> bytes:
    """slot0() return data; only the first word (sqrtPriceX96) matters to the decoder."""
    return word(sqrt_price_x96) + b"\x00" * (32 * extra_words)


def sqrt_price_x96_for(price: float, decimals_diff: int = 12) -> int:
    """sqrtPriceX96 of a USDC(6)/WETH(18) pool quoting ETH at `price` USD."""
    return math.isqrt((1 << 192) * 10 ** decimals_diff // int(price))


# ---------------------------------------------------------------------------
# Transport: canned response / always fail
# ---------------------------------------------------------------------------


class FakeTransport:
    """Returns canned bytes (or raises) and records every call."""

    def __init__(self, response: bytes = b"", error: Optional[Exception] = None):
        self._response = response
        self._error = error
        self.calls: List[Tuple[str, str, bytes, int]] = []

    @property
    def chain_name(self) -> str:
        return "fake"

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def call_contract(self, rpc_url: str, address: str, call_data: bytes, timeout_ms: int) -> bytes:
        self.calls.append((rpc_url, address, call_data, timeout_ms))
        if self._error is not None:
            raise self._error
        return self._response


# ---------------------------------------------------------------------------
# Protocol: fixed price
# ---------------------------------------------------------------------------


class FakeProtocol:
    """Ignores the raw bytes and returns a fixed price."""

    def __init__(self, price: float, selector: bytes = b"\xde\xad\xbe\xef"):
        self._price = price
        self._selector = selector
        self.parsed: List[bytes] = []

    @property
    def protocol_name(self) -> str:
        return "fake"

    @property
    def family(self) -> ProtocolFamily:
        return ProtocolFamily.CONSTANT_PRODUCT

    def build_call_data(self, pair: TradingPair) -> bytes:
        return self._selector

    def parse_price(self, raw: bytes) -> float:
        self.parsed.append(raw)
        return self._price


# ---------------------------------------------------------------------------
# Exchange: fixed outcome, for cycle tests
# ---------------------------------------------------------------------------


class FakeExchange:
    """ExchangeInterface with a fixed price or a fixed exception."""

    def __init__(
        self,
        exchange_id: int,
        name: str,
        price_micro: int = 2_000_000_000,
        error: Optional[Exception] = None,
        pairs: Tuple[TradingPair, ...] = (TradingPair.ETH_USD,),
    ):
        self._id = exchange_id
        self._name = name
        self._price_micro = price_micro
        self._error = error
        self._pairs = pairs
        self.calls: List[Tuple[TradingPair, int, PriceBounds]] = []

    @property
    def exchange_id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    def fetch_price(self, pair: TradingPair, timeout_ms: int, bounds: PriceBounds) -> PricePoint:
        self.calls.append((pair, timeout_ms, bounds))
        if pair not in self._pairs:
            raise UnsupportedPair(f"{self._name} has no pool for {pair.display}")
        if self._error is not None:
            raise self._error
        return PricePoint(price_micro=self._price_micro, timestamp_ms=FAKE_TIMESTAMP_MS)
