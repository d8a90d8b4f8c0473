"""
Chain transports: abstractions for contract read calls on different networks.
Each transport implements the ChainTransport protocol.
"""

from __future__ import annotations

from .base import ChainTransport
from .envelope import decode_hex, extract_hex_result
from .evm import EvmChain, build_eth_call_body

__all__ = [
    "ChainTransport",
    "EvmChain",
    "build_eth_call_body",
    "decode_hex",
    "extract_hex_result",
]
