"""
Ingestion API: oracle context and one-cycle execution.

The CLI drives this module; it owns the DB connection, migrations and the
exchange registry. Each cycle fetches every configured pair from the first
N exchanges, stores accepted prices and logs failures keyed by exchange name
and pair. A failing fetch never affects the others in the same cycle.
"""

from __future__ import annotations

import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..bounds import resolve_bounds
from ..core.errors import OracleError, UnsupportedPair
from ..db.migrations import run_migrations
from ..db.store import PriceStore, PriceUpdated
from ..exchanges.base import ExchangeInterface
from ..exchanges.registry import ExchangeRegistry, build_registry
from ..pairs import TradingPair

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class FetchFailure:
    exchange_id: int
    exchange_name: str
    pair: str
    kind: str
    message: str


@dataclass
class CycleReport:
    """Outcome of one cycle. Lists follow registry order, then pair order."""

    tick: Optional[int] = None
    skipped: bool = False
    updates: List[PriceUpdated] = field(default_factory=list)
    failures: List[FetchFailure] = field(default_factory=list)
    unsupported: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok_count(self) -> int:
        return len(self.updates)


_Outcome = Union[PriceUpdated, FetchFailure, Tuple[str, str]]


def should_run(tick: int, interval: int) -> bool:
    """True on every `interval`-th tick (tick 0 included)."""
    if interval < 1:
        raise ValueError(f"interval must be >= 1, got {interval}")
    return tick % interval == 0


def _fetch_one(
    exchange: ExchangeInterface,
    pair: TradingPair,
    timeout_ms: int,
    bounds_overrides: Optional[Mapping[str, Any]],
) -> _Outcome:
    try:
        point = exchange.fetch_price(pair, timeout_ms, resolve_bounds(pair, bounds_overrides))
    except UnsupportedPair:
        return (exchange.name, pair.display)
    except OracleError as e:
        return FetchFailure(exchange.exchange_id, exchange.name, pair.display, e.kind, str(e))
    except Exception as e:
        logger.exception("%s | %s: unexpected error", exchange.name, pair.display)
        return FetchFailure(exchange.exchange_id, exchange.name, pair.display, type(e).__name__, str(e))
    return PriceUpdated(
        pair_hash=pair.hash,
        pair=pair.display,
        exchange_id=exchange.exchange_id,
        exchange_name=exchange.name,
        price_micro=point.price_micro,
        timestamp_ms=point.timestamp_ms,
    )


def run_one_cycle(
    exchanges: Sequence[ExchangeInterface],
    pairs: Sequence[TradingPair],
    *,
    store: Optional[PriceStore] = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    bounds_overrides: Optional[Mapping[str, Any]] = None,
    max_exchanges: Optional[int] = None,
    max_workers: int = 1,
    log: logging.Logger | None = None,
) -> CycleReport:
    """
    Fetch every pair from the first `max_exchanges` exchanges.

    Successes are written to `store` (if given) and committed once at the end.
    With max_workers > 1 fetches run on a thread pool; store writes stay on the
    calling thread. On a store exception the transaction is rolled back and
    the exception re-raised.
    """
    _log = log if log is not None else logger
    selected = list(exchanges if max_exchanges is None else exchanges[:max_exchanges])
    tasks = [(ex, pair) for ex in selected for pair in pairs]

    if max_workers > 1 and len(tasks) > 1:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="oracle-fetch") as pool:
            outcomes = list(
                pool.map(lambda t: _fetch_one(t[0], t[1], timeout_ms, bounds_overrides), tasks)
            )
    else:
        outcomes = [_fetch_one(ex, pair, timeout_ms, bounds_overrides) for ex, pair in tasks]

    report = CycleReport()
    for outcome in outcomes:
        if isinstance(outcome, PriceUpdated):
            report.updates.append(outcome)
        elif isinstance(outcome, FetchFailure):
            report.failures.append(outcome)
            _log.warning("%s | %s | %s: %s", outcome.exchange_name, outcome.pair, outcome.kind, outcome.message)
        else:
            report.unsupported.append(outcome)
            _log.debug("%s | %s: no pool configured", outcome[0], outcome[1])

    if store is not None and report.updates:
        try:
            for event in report.updates:
                store.put(event)
            store.commit()
        except Exception:
            try:
                store.rollback()
            except Exception:
                pass
            raise

    _log.info(
        "cycle done: exchanges=%d pairs=%d ok=%d failed=%d",
        len(selected), len(pairs), report.ok_count, len(report.failures),
    )
    return report


def run_for_tick(
    tick: int,
    interval: int,
    exchanges: Sequence[ExchangeInterface],
    pairs: Sequence[TradingPair],
    **kwargs: Any,
) -> CycleReport:
    """Gate on the update interval, then run one cycle."""
    if not should_run(tick, interval):
        return CycleReport(tick=tick, skipped=True)
    report = run_one_cycle(exchanges, pairs, **kwargs)
    report.tick = tick
    return report


@dataclass
class OracleContext:
    """Holds DB connection, store and registry for the poll loop. Use as context manager or call close()."""

    conn: sqlite3.Connection
    store: PriceStore
    registry: ExchangeRegistry
    _closed: bool = field(default=False, repr=False)

    def close(self) -> None:
        """Close the DB connection. Idempotent: safe to call multiple times."""
        if self._closed:
            return
        try:
            self.conn.close()
        finally:
            self._closed = True

    def __enter__(self) -> OracleContext:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_val is not None:
            try:
                self.conn.rollback()
            except Exception:
                pass
        self.close()


def get_oracle_context(
    db_path: str,
    *,
    registry: Optional[ExchangeRegistry] = None,
    declarations: Optional[Sequence[Dict[str, Any]]] = None,
) -> OracleContext:
    """
    Open DB, run migrations, build the exchange registry.
    Use as: with get_oracle_context(db_path) as ctx: ...
    If registry is provided it is used instead of building one (for tests).
    """
    conn = sqlite3.connect(db_path)
    run_migrations(conn)
    if registry is None:
        registry = build_registry(declarations)
    return OracleContext(conn=conn, store=PriceStore(conn), registry=registry)


__all__ = [
    "CycleReport",
    "FetchFailure",
    "OracleContext",
    "get_oracle_context",
    "run_for_tick",
    "run_one_cycle",
    "should_run",
]
