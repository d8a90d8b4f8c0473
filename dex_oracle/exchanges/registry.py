"""
Exchange registry: the fixed, ordered set of exchanges queried by the oracle.

Built once at startup, either from the built-in declarations below or from
the `exchanges:` list in config.yaml. Order is declaration order and never
changes, so callers can take a stable prefix (e.g. "first N exchanges per
cycle").

Declaration shape:
    {"id": 1, "name": "Uniswap V3 (Ethereum)", "rpc_url": "https://...",
     "protocol": "uniswap_v3", "pools": {"ETH/USD": "0x..."},
     "options": {"window": [1000, 20000]}}
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..chains.base import ChainTransport
from ..pairs import TradingPair
from ..protocols import create_protocol
from .base import Exchange

logger = logging.getLogger(__name__)

DEFAULT_EXCHANGES: List[Dict[str, Any]] = [
    # Ethereum
    {
        "id": 1,
        "name": "Uniswap V3 (Ethereum)",
        "rpc_url": "https://eth.llamarpc.com",
        "protocol": "uniswap_v3",
        "pools": {"ETH/USD": "0x8ad599c3a0ff1de082011efddc58f1908eb6e6d8"},  # USDC/WETH 0.3%
    },
    {
        "id": 2,
        "name": "SushiSwap V2 (Ethereum)",
        "rpc_url": "https://eth.llamarpc.com",
        "protocol": "uniswap_v2",
        "pools": {"ETH/USD": "0x397ff1542f962076d0bfe58ea045ffa2d347aca0"},
    },
    # BSC
    {
        "id": 3,
        "name": "PancakeSwap V2 (BSC)",
        "rpc_url": "https://bsc-dataseed.binance.org",
        "protocol": "pancakeswap",
        "pools": {"ETH/USD": "0xea26b78255df2bbc31c1ebf60010d78670185bd0"},
    },
    # Polygon
    {
        "id": 4,
        "name": "QuickSwap V2 (Polygon)",
        "rpc_url": "https://polygon-rpc.com",
        "protocol": "quickswap",
        "pools": {"ETH/USD": "0x853ee4b2a13f8a742d64c8f088be7ba2131f670d"},
    },
    # Avalanche: AVAX/USDC pool, converted to the ETH/USD scale
    {
        "id": 5,
        "name": "Trader Joe (Avalanche)",
        "rpc_url": "https://api.avax.network/ext/bc/C/rpc",
        "protocol": "trader_joe",
        "pools": {"ETH/USD": "0xa389f9430876455c36478deea9769b7ca4e3ddb1"},
    },
]


class ExchangeRegistry:
    """
    Immutable, ordered collection of exchanges with unique ids.

    Usage:
        registry = ExchangeRegistry([uniswap, sushiswap])
        for exchange in registry.all_exchanges():
            ...
    """

    def __init__(self, exchanges: Sequence[Exchange]) -> None:
        seen: Dict[int, str] = {}
        for ex in exchanges:
            if ex.exchange_id in seen:
                raise ValueError(
                    f"Duplicate exchange id {ex.exchange_id}: "
                    f"'{ex.name}' and '{seen[ex.exchange_id]}'"
                )
            seen[ex.exchange_id] = ex.name
        self._exchanges: Tuple[Exchange, ...] = tuple(exchanges)
        self._by_id: Dict[int, Exchange] = {ex.exchange_id: ex for ex in self._exchanges}

    def all_exchanges(self) -> Tuple[Exchange, ...]:
        return self._exchanges

    def get(self, exchange_id: int) -> Exchange:
        ex = self._by_id.get(exchange_id)
        if ex is None:
            raise KeyError(f"Unknown exchange id {exchange_id}. Available: {list(self._by_id)}")
        return ex

    @property
    def names(self) -> List[str]:
        return [ex.name for ex in self._exchanges]

    @property
    def ids(self) -> List[int]:
        return [ex.exchange_id for ex in self._exchanges]

    def __len__(self) -> int:
        return len(self._exchanges)

    def __iter__(self) -> Iterator[Exchange]:
        return iter(self._exchanges)


def _parse_pools(raw: Mapping[str, str]) -> Dict[TradingPair, str]:
    return {TradingPair.parse(k): str(v) for k, v in raw.items() if v}


def exchange_from_declaration(
    decl: Mapping[str, Any],
    transport: Optional[ChainTransport] = None,
) -> Exchange:
    for key in ("id", "name", "rpc_url", "protocol"):
        if key not in decl:
            raise ValueError(f"Exchange declaration missing '{key}': {dict(decl)}")
    return Exchange(
        exchange_id=int(decl["id"]),
        name=str(decl["name"]),
        rpc_url=str(decl["rpc_url"]),
        protocol=create_protocol(str(decl["protocol"]), decl.get("options")),
        pools=_parse_pools(decl.get("pools") or {}),
        transport=transport,
    )


def build_registry(
    declarations: Optional[Sequence[Mapping[str, Any]]] = None,
    transport: Optional[ChainTransport] = None,
) -> ExchangeRegistry:
    """Build a registry from declarations; None or empty uses DEFAULT_EXCHANGES."""
    decls = declarations or DEFAULT_EXCHANGES
    exchanges = [exchange_from_declaration(d, transport) for d in decls]
    registry = ExchangeRegistry(exchanges)
    logger.debug("Registered %d exchanges: %s", len(registry), registry.names)
    return registry


__all__ = [
    "DEFAULT_EXCHANGES",
    "ExchangeRegistry",
    "build_registry",
    "exchange_from_declaration",
]
