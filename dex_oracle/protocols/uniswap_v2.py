"""
Uniswap V2 constant-product pools (any EVM chain; also SushiSwap and forks).

getReserves() returns (uint112 reserve0, uint112 reserve1, uint32
blockTimestampLast), each padded to a 32-byte word.

Without a PoolLayout the adapter does not know which reserve is the priced
asset or what decimals each side has, so it tries four candidates in fixed
order and takes the first one inside the sanity window:

    r0/r1 * 1e12   reserve0 = USDC (6), reserve1 = ETH (18)
    r1/r0 * 1e-12  reserve0 = ETH, reserve1 = USDC
    r0/r1          same decimals
    r1/r0          same decimals, inverted

With a PoolLayout the price is computed directly from the declared order and
decimals.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..core.errors import MalformedData, OutOfRange
from ..pairs import TradingPair
from .base import (
    ETH_USD_WINDOW,
    WORD_BYTES,
    PoolLayout,
    ProtocolFamily,
    SanityWindow,
    coerce_window,
    read_word,
    require_length,
    scaled_ratio,
)

logger = logging.getLogger(__name__)

GET_RESERVES_SELECTOR = bytes.fromhex("0902f1ac")
RESERVES_RESPONSE_BYTES = 3 * WORD_BYTES


def decode_reserves(raw: bytes, label: str) -> Tuple[int, int]:
    require_length(raw, RESERVES_RESPONSE_BYTES, label)
    reserve0 = read_word(raw, 0)
    reserve1 = read_word(raw, 1)
    if reserve0 == 0 or reserve1 == 0:
        raise MalformedData(f"Zero liquidity in {label} pool")
    return reserve0, reserve1


def reserve_candidates(reserve0: int, reserve1: int) -> Tuple[float, float, float, float]:
    return (
        scaled_ratio(reserve0, reserve1, 12),
        scaled_ratio(reserve1, reserve0, -12),
        scaled_ratio(reserve0, reserve1),
        scaled_ratio(reserve1, reserve0),
    )


def layout_price(reserve0: int, reserve1: int, layout: PoolLayout) -> float:
    """Quote-per-base price from reserves with known order and decimals."""
    d0, d1 = layout.token0_decimals, layout.token1_decimals
    if layout.base_is_token0:
        return scaled_ratio(reserve1, reserve0, d0 - d1)
    return scaled_ratio(reserve0, reserve1, d1 - d0)


class UniswapV2Protocol:
    """getReserves()-based pricing for constant-product pools."""

    label = "Uniswap V2"
    asset = "ETH"

    def __init__(
        self,
        window: Optional[SanityWindow] = None,
        layout: Optional[PoolLayout] = None,
    ) -> None:
        self.window = coerce_window(window, ETH_USD_WINDOW)
        self.layout = layout

    @property
    def protocol_name(self) -> str:
        return "uniswap_v2"

    @property
    def family(self) -> ProtocolFamily:
        return ProtocolFamily.CONSTANT_PRODUCT

    def build_call_data(self, pair: TradingPair) -> bytes:
        return GET_RESERVES_SELECTOR

    def parse_price(self, raw: bytes) -> float:
        reserve0, reserve1 = decode_reserves(raw, self.label)
        return self._pick(reserve0, reserve1, self.window)

    def _pick(self, reserve0: int, reserve1: int, window: SanityWindow) -> float:
        if self.layout is not None:
            price = layout_price(reserve0, reserve1, self.layout)
            if window.contains(price):
                return price
            raise OutOfRange(f"{self.label} {self.asset} price {price} outside ({window.low}, {window.high})")

        for price in reserve_candidates(reserve0, reserve1):
            if window.contains(price):
                return price
        logger.debug("%s reserves r0=%d r1=%d: no candidate in window", self.label, reserve0, reserve1)
        raise OutOfRange(f"No reasonable {self.asset} price found on {self.label}")
