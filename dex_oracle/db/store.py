"""
Price store: accepted price points keyed by (pair_hash, exchange_id).

Mirrors the ledger layout the oracle feeds: one latest (price_micro,
timestamp_ms) value per key, plus an append-only PriceUpdated log.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..exchanges.base import PricePoint
from ..pairs import PAIR_HASH_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceUpdated:
    """Event recorded for every stored price point."""

    pair_hash: bytes
    pair: str
    exchange_id: int
    exchange_name: str
    price_micro: int
    timestamp_ms: int

    @property
    def point(self) -> PricePoint:
        return PricePoint(price_micro=self.price_micro, timestamp_ms=self.timestamp_ms)


def _check_hash(pair_hash: bytes) -> bytes:
    if len(pair_hash) != PAIR_HASH_SIZE:
        raise ValueError(f"pair_hash must be {PAIR_HASH_SIZE} bytes, got {len(pair_hash)}")
    return bytes(pair_hash)


class PriceStore:
    """Read/write price points in SQLite. Writes are not committed until commit()."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def put(self, event: PriceUpdated) -> None:
        """Upsert the latest value for the event's key and append the event."""
        pair_hash = _check_hash(event.pair_hash)
        self._conn.execute(
            """
            INSERT INTO price_data (pair_hash, exchange_id, price_micro, timestamp_ms)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(pair_hash, exchange_id) DO UPDATE SET
                price_micro = excluded.price_micro,
                timestamp_ms = excluded.timestamp_ms;
            """,
            (pair_hash, event.exchange_id, event.price_micro, event.timestamp_ms),
        )
        self._conn.execute(
            """
            INSERT INTO price_updates
                (pair_hash, pair, exchange_id, exchange_name, price_micro, timestamp_ms)
            VALUES (?, ?, ?, ?, ?, ?);
            """,
            (
                pair_hash,
                event.pair,
                event.exchange_id,
                event.exchange_name,
                event.price_micro,
                event.timestamp_ms,
            ),
        )

    def get_price(self, pair_hash: bytes, exchange_id: int) -> Optional[PricePoint]:
        row = self._conn.execute(
            "SELECT price_micro, timestamp_ms FROM price_data WHERE pair_hash = ? AND exchange_id = ?",
            (_check_hash(pair_hash), exchange_id),
        ).fetchone()
        if row is None:
            return None
        return PricePoint(price_micro=int(row[0]), timestamp_ms=int(row[1]))

    def get_all_prices(self, pair_hash: bytes) -> Dict[int, PricePoint]:
        """All stored prices for a pair, keyed by exchange id (ascending)."""
        cur = self._conn.execute(
            "SELECT exchange_id, price_micro, timestamp_ms FROM price_data "
            "WHERE pair_hash = ? ORDER BY exchange_id",
            (_check_hash(pair_hash),),
        )
        return {
            int(row[0]): PricePoint(price_micro=int(row[1]), timestamp_ms=int(row[2]))
            for row in cur.fetchall()
        }

    def load_updates(self, pair_hash: bytes, limit: int = 100) -> List[PriceUpdated]:
        """Most recent PriceUpdated events for a pair, newest first."""
        cur = self._conn.execute(
            "SELECT pair_hash, pair, exchange_id, exchange_name, price_micro, timestamp_ms "
            "FROM price_updates WHERE pair_hash = ? ORDER BY id DESC LIMIT ?",
            (_check_hash(pair_hash), int(limit)),
        )
        return [
            PriceUpdated(
                pair_hash=bytes(row[0]),
                pair=row[1],
                exchange_id=int(row[2]),
                exchange_name=row[3],
                price_micro=int(row[4]),
                timestamp_ms=int(row[5]),
            )
            for row in cur.fetchall()
        ]

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()
