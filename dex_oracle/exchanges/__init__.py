"""
Exchanges combine a chain transport and a DEX protocol into a fetchable
price source; the registry holds the fixed set queried by the oracle.
"""

from __future__ import annotations

from .base import Exchange, ExchangeInterface, PricePoint
from .registry import DEFAULT_EXCHANGES, ExchangeRegistry, build_registry, exchange_from_declaration

__all__ = [
    "DEFAULT_EXCHANGES",
    "Exchange",
    "ExchangeInterface",
    "ExchangeRegistry",
    "PricePoint",
    "build_registry",
    "exchange_from_declaration",
]
