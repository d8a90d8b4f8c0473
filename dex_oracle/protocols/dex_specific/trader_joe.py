"""
Trader Joe (Avalanche).

The configured pool is AVAX/USDC. The AVAX price is found with the usual
reserve candidates inside the AVAX window, then scaled by a fixed multiplier
to land on the ETH/USD scale and checked against the ETH window.
"""

from __future__ import annotations

from typing import Optional

from ...core.errors import OutOfRange
from ..base import ETH_USD_WINDOW, PoolLayout, SanityWindow, coerce_window
from ..uniswap_v2 import UniswapV2Protocol, decode_reserves

AVAX_USD_WINDOW = SanityWindow(20.0, 100.0)
# ETH has traded at roughly 100-150x AVAX
AVAX_TO_ETH_MULTIPLIER = 120.0


class TraderJoeProtocol(UniswapV2Protocol):
    label = "Trader Joe"
    asset = "AVAX"

    def __init__(
        self,
        window: Optional[SanityWindow] = None,
        layout: Optional[PoolLayout] = None,
        pool_window: Optional[SanityWindow] = None,
        multiplier: float = AVAX_TO_ETH_MULTIPLIER,
    ) -> None:
        super().__init__(window=coerce_window(window, ETH_USD_WINDOW), layout=layout)
        self.pool_window = coerce_window(pool_window, AVAX_USD_WINDOW)
        self.multiplier = multiplier

    @property
    def protocol_name(self) -> str:
        return "trader_joe"

    def parse_price(self, raw: bytes) -> float:
        reserve0, reserve1 = decode_reserves(raw, self.label)
        avax_price = self._pick(reserve0, reserve1, self.pool_window)

        eth_price = avax_price * self.multiplier
        if self.window.contains(eth_price):
            return eth_price
        raise OutOfRange(f"{self.label} ETH price {eth_price} out of reasonable range")
