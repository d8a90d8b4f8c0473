"""
Database layer: migrations and the price store.

All accepted price points are written through PriceStore.
"""

from __future__ import annotations

from .migrations import run_migrations
from .store import PriceStore, PriceUpdated

__all__ = ["run_migrations", "PriceStore", "PriceUpdated"]
