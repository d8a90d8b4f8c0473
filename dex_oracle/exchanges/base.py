"""
Exchange: one RPC endpoint + one protocol adapter + per-pair pool addresses,
addressable by a small numeric id.

fetch_price runs the whole pipeline for one pair:

    pool lookup -> call data -> transport -> envelope -> parse -> bounds -> PricePoint

Any stage may raise an OracleError; nothing is retried here.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, runtime_checkable

from ..bounds import PriceBounds, check_bounds, to_micro
from ..chains.base import ChainTransport
from ..chains.evm import EvmChain
from ..core.errors import UnsupportedPair
from ..pairs import TradingPair
from ..protocols.base import DexProtocol

logger = logging.getLogger(__name__)

MAX_EXCHANGE_ID = 255


@dataclass(frozen=True)
class PricePoint:
    """Accepted price in micro-units of the quote currency, stamped in unix ms."""

    price_micro: int
    timestamp_ms: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.price_micro, self.timestamp_ms)


def now_ms() -> int:
    return int(time.time() * 1000)


@runtime_checkable
class ExchangeInterface(Protocol):
    """Common surface for iterating heterogeneous exchanges."""

    @property
    def exchange_id(self) -> int: ...

    @property
    def name(self) -> str: ...

    def fetch_price(self, pair: TradingPair, timeout_ms: int, bounds: PriceBounds) -> PricePoint:
        ...


class Exchange:
    """Chain transport + DEX protocol bound to an endpoint and pool table."""

    def __init__(
        self,
        exchange_id: int,
        name: str,
        rpc_url: str,
        protocol: DexProtocol,
        pools: Mapping[TradingPair, str],
        transport: Optional[ChainTransport] = None,
    ) -> None:
        if not 0 <= exchange_id <= MAX_EXCHANGE_ID:
            raise ValueError(f"exchange_id must fit in one byte, got {exchange_id}")
        if transport is None:
            transport = EvmChain()
        self._exchange_id = exchange_id
        self._name = name
        self._rpc_url = rpc_url
        self._protocol = protocol
        self._pools = dict(pools)
        self._transport = transport

    def __repr__(self) -> str:
        return (
            f"Exchange(id={self._exchange_id}, name={self._name!r}, "
            f"protocol={self._protocol.protocol_name!r})"
        )

    @property
    def exchange_id(self) -> int:
        return self._exchange_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    @property
    def protocol(self) -> DexProtocol:
        return self._protocol

    def pool_address(self, pair: TradingPair) -> Optional[str]:
        address = self._pools.get(pair)
        return address or None

    def supports(self, pair: TradingPair) -> bool:
        return self.pool_address(pair) is not None

    def fetch_price(self, pair: TradingPair, timeout_ms: int, bounds: PriceBounds) -> PricePoint:
        address = self.pool_address(pair)
        if address is None:
            raise UnsupportedPair(f"{self._name} has no pool for {pair.display}")

        call_data = self._protocol.build_call_data(pair)
        raw = self._transport.call_contract(self._rpc_url, address, call_data, timeout_ms)
        price = self._protocol.parse_price(raw)
        price_micro = check_bounds(to_micro(price), bounds)

        timestamp_ms = now_ms()
        logger.info("%s | %s | $%.2f", self._name, pair.display, price)
        return PricePoint(price_micro=price_micro, timestamp_ms=timestamp_ms)


__all__ = ["Exchange", "ExchangeInterface", "PricePoint", "now_ms"]
