"""
DEX protocol adapters, independent of chain.

Adapters are looked up by name so exchanges can be declared in config.yaml:

    protocol = create_protocol("uniswap_v2", {"window": [1000, 20000]})
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type

from .base import (
    ETH_USD_WINDOW,
    USDC_WETH_LAYOUT,
    DexProtocol,
    PoolLayout,
    ProtocolFamily,
    SanityWindow,
)
from .dex_specific import PancakeSwapProtocol, QuickSwapProtocol, TraderJoeProtocol
from .uniswap_v2 import GET_RESERVES_SELECTOR, UniswapV2Protocol
from .uniswap_v3 import SLOT0_SELECTOR, UniswapV3Protocol

PROTOCOLS: Dict[str, Type[Any]] = {
    "uniswap_v2": UniswapV2Protocol,
    "uniswap_v3": UniswapV3Protocol,
    "pancakeswap": PancakeSwapProtocol,
    "quickswap": QuickSwapProtocol,
    "trader_joe": TraderJoeProtocol,
}


def _window(value: Any) -> Optional[SanityWindow]:
    if value is None or isinstance(value, SanityWindow):
        return value
    low, high = value
    return SanityWindow(float(low), float(high))


def _layout(value: Any) -> Optional[PoolLayout]:
    if value is None or isinstance(value, PoolLayout):
        return value
    return PoolLayout(
        token0_decimals=int(value["token0_decimals"]),
        token1_decimals=int(value["token1_decimals"]),
        base_is_token0=bool(value.get("base_is_token0", False)),
    )


def create_protocol(name: str, options: Optional[Mapping[str, Any]] = None) -> DexProtocol:
    """
    Instantiate a protocol adapter by registered name.

    options may carry `window` ([low, high]), `layout` (token0_decimals,
    token1_decimals, base_is_token0) and, for trader_joe, `pool_window` and
    `multiplier`.
    """
    cls = PROTOCOLS.get(name)
    if cls is None:
        raise KeyError(f"Unknown protocol '{name}'. Available: {list(PROTOCOLS)}")
    opts = dict(options or {})
    kwargs: Dict[str, Any] = {
        "window": _window(opts.pop("window", None)),
        "layout": _layout(opts.pop("layout", None)),
    }
    if cls is TraderJoeProtocol:
        kwargs["pool_window"] = _window(opts.pop("pool_window", None))
        if "multiplier" in opts:
            kwargs["multiplier"] = float(opts.pop("multiplier"))
    if opts:
        raise ValueError(f"Unsupported options for protocol '{name}': {sorted(opts)}")
    return cls(**kwargs)


__all__ = [
    "DexProtocol",
    "ETH_USD_WINDOW",
    "GET_RESERVES_SELECTOR",
    "PROTOCOLS",
    "PancakeSwapProtocol",
    "PoolLayout",
    "ProtocolFamily",
    "QuickSwapProtocol",
    "SLOT0_SELECTOR",
    "SanityWindow",
    "TraderJoeProtocol",
    "USDC_WETH_LAYOUT",
    "UniswapV2Protocol",
    "UniswapV3Protocol",
    "create_protocol",
]
