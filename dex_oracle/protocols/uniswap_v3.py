"""
Uniswap V3 concentrated-liquidity pools (any EVM chain).

slot0() returns sqrtPriceX96 first: sqrt(token1/token0) in raw units, as a
Q64.96 fixed-point number. Price of token1 in token0 is therefore

    2**192 / sqrtPriceX96**2 * 10**(d1 - d0)

which for the default USDC(6)/WETH(18) pool is the USD price of ETH.
"""

from __future__ import annotations

from typing import Optional

from ..core.errors import MalformedData, OutOfRange
from ..pairs import TradingPair
from .base import (
    ETH_USD_WINDOW,
    USDC_WETH_LAYOUT,
    WORD_BYTES,
    PoolLayout,
    ProtocolFamily,
    SanityWindow,
    coerce_window,
    read_word,
    require_length,
    scaled_ratio,
)

SLOT0_SELECTOR = bytes.fromhex("3850c7bd")
Q192 = 1 << 192


def sqrt_price_to_price(sqrt_price_x96: int, layout: PoolLayout) -> float:
    squared = sqrt_price_x96 * sqrt_price_x96
    d0, d1 = layout.token0_decimals, layout.token1_decimals
    if layout.base_is_token0:
        return scaled_ratio(squared, Q192, d0 - d1)
    return scaled_ratio(Q192, squared, d1 - d0)


class UniswapV3Protocol:
    """slot0()-based pricing for concentrated-liquidity pools."""

    label = "Uniswap V3"

    def __init__(
        self,
        window: Optional[SanityWindow] = None,
        layout: Optional[PoolLayout] = None,
    ) -> None:
        self.window = coerce_window(window, ETH_USD_WINDOW)
        self.layout = layout if layout is not None else USDC_WETH_LAYOUT

    @property
    def protocol_name(self) -> str:
        return "uniswap_v3"

    @property
    def family(self) -> ProtocolFamily:
        return ProtocolFamily.CONCENTRATED_LIQUIDITY

    def build_call_data(self, pair: TradingPair) -> bytes:
        return SLOT0_SELECTOR

    def parse_price(self, raw: bytes) -> float:
        require_length(raw, WORD_BYTES, self.label)
        sqrt_price_x96 = read_word(raw, 0)
        if sqrt_price_x96 == 0:
            raise MalformedData("Invalid sqrtPriceX96: zero")

        price = sqrt_price_to_price(sqrt_price_x96, self.layout)
        if self.window.contains(price):
            return price
        raise OutOfRange(f"{self.label} price {price} out of reasonable range")
