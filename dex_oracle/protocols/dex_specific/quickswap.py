"""QuickSwap V2 (Polygon). Same getReserves() layout and pricing as Uniswap V2."""

from __future__ import annotations

from ..uniswap_v2 import UniswapV2Protocol


class QuickSwapProtocol(UniswapV2Protocol):
    label = "QuickSwap"

    @property
    def protocol_name(self) -> str:
        return "quickswap"
