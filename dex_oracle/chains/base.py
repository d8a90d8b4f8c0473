"""
Chain transport interface.

A transport performs one read-only contract call and returns the raw decoded
response bytes. Implementations must not retry or cache.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChainTransport(Protocol):
    """Protocol for chain-specific contract read calls."""

    @property
    def chain_name(self) -> str: ...

    def call_contract(
        self,
        rpc_url: str,
        address: str,
        call_data: bytes,
        timeout_ms: int,
    ) -> bytes:
        """Execute one contract read call against rpc_url and return the raw result bytes."""
        ...
