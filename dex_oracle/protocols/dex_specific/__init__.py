"""
Chain-specific DEX protocols that differ from the generic Uniswap V2/V3
adapters only in identity or in post-processing of the decoded price.
"""

from __future__ import annotations

from .pancakeswap import PancakeSwapProtocol
from .quickswap import QuickSwapProtocol
from .trader_joe import AVAX_TO_ETH_MULTIPLIER, AVAX_USD_WINDOW, TraderJoeProtocol

__all__ = [
    "AVAX_TO_ETH_MULTIPLIER",
    "AVAX_USD_WINDOW",
    "PancakeSwapProtocol",
    "QuickSwapProtocol",
    "TraderJoeProtocol",
]
