"""Fake transports, protocols and exchanges for oracle tests (no live network)."""

from .chains import (
    FAKE_TIMESTAMP_MS,
    FakeExchange,
    FakeProtocol,
    FakeTransport,
    reserves_payload,
    slot0_payload,
    sqrt_price_x96_for,
    word,
)

__all__ = [
    "FAKE_TIMESTAMP_MS",
    "FakeExchange",
    "FakeProtocol",
    "FakeTransport",
    "reserves_payload",
    "slot0_payload",
    "sqrt_price_x96_for",
    "word",
]
