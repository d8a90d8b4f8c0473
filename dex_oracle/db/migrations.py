"""
Idempotent database migrations.

All schema changes use CREATE TABLE IF NOT EXISTS so they can be re-run
safely at any time.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)


def run_migrations(conn: sqlite3.Connection) -> None:
    """
    Apply all schema migrations idempotently.

    Safe to call on every startup; only creates what's missing.
    """
    # Latest accepted price per (pair, exchange)
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS price_data (
            pair_hash BLOB NOT NULL,
            exchange_id INTEGER NOT NULL,
            price_micro INTEGER NOT NULL,
            timestamp_ms INTEGER NOT NULL,
            PRIMARY KEY (pair_hash, exchange_id)
        );
        """
    )

    # Append-only log of PriceUpdated events
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS price_updates (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            pair_hash BLOB NOT NULL,
            pair TEXT NOT NULL,
            exchange_id INTEGER NOT NULL,
            exchange_name TEXT NOT NULL,
            price_micro INTEGER NOT NULL,
            timestamp_ms INTEGER NOT NULL
        );
        """
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_price_updates_pair_ts ON price_updates(pair_hash, timestamp_ms);"
    )
    conn.commit()
    logger.debug("Migrations applied")
