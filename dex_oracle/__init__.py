"""
dex_oracle: on-chain DEX price acquisition.

Prices are read straight from pool contracts over JSON-RPC eth_call, decoded
per protocol family, and validated against per-pair bounds. Stable facades
only; does not import cli.
"""

from __future__ import annotations

from .bounds import PriceBounds
from .core.errors import OracleError
from .exchanges import Exchange, ExchangeRegistry, PricePoint, build_registry
from .pairs import TradingPair, bounds_for, display, hash_of

__version__ = "0.1.0"

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "Exchange",
    "ExchangeRegistry",
    "OracleError",
    "PriceBounds",
    "PricePoint",
    "TradingPair",
    "bounds_for",
    "build_registry",
    "display",
    "hash_of",
]
