"""PancakeSwap V2 (BSC). Same getReserves() layout and pricing as Uniswap V2."""

from __future__ import annotations

from ..uniswap_v2 import UniswapV2Protocol


class PancakeSwapProtocol(UniswapV2Protocol):
    label = "PancakeSwap"

    @property
    def protocol_name(self) -> str:
        return "pancakeswap"
