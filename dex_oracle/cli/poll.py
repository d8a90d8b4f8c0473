#!/usr/bin/env python3
"""
Poll:
- Every --interval seconds advance one tick; on every `update_interval`-th
  tick fetch each configured pair from the first N exchanges via eth_call
- Accepted prices -> SQLite price_data / price_updates

Failures are logged per exchange and pair; the loop never stops on them.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

import yaml

from dex_oracle import config as oracle_config
from dex_oracle.bounds import resolve_bounds
from dex_oracle.exchanges.registry import build_registry
from dex_oracle.ingest import get_oracle_context, run_for_tick
from dex_oracle.pairs import TradingPair

logger = logging.getLogger("dex_oracle.poll")


def _setup_logging(log_file: Optional[str], verbose: bool) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )


def _parse_pairs(raw: List[str], default: List[str]) -> List[TradingPair]:
    return [TradingPair.parse(p) for p in (raw or default)]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Poll DEX pool prices via eth_call into SQLite")
    parser.add_argument("--config", default=None, help="Path to config YAML (default: config.yaml at repo root)")
    parser.add_argument("--db", default=None, help="SQLite path (default from config db.path)")
    parser.add_argument("--pair", action="append", default=[], metavar="BASE/QUOTE", help="Pair to fetch (repeatable); e.g. ETH/USD")
    parser.add_argument("--interval", type=float, default=None, help="Seconds per tick (default from config oracle.poll_every_seconds)")
    parser.add_argument("--max-exchanges", type=int, default=None, metavar="N", help="Query at most N exchanges per cycle")
    parser.add_argument("--timeout-ms", type=int, default=None, help="Per-call deadline in milliseconds")
    parser.add_argument("--once", action="store_true", help="Run a single cycle (ignores update_interval) and exit")
    parser.add_argument("--list-exchanges", action="store_true", help="Print the registry and exit")
    parser.add_argument("--log-file", default=None, help="Also append all log output to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    _setup_logging(args.log_file, args.verbose)

    try:
        cfg = oracle_config.get_config(Path(args.config) if args.config else None)
        oracle = dict(cfg["oracle"])
        if args.max_exchanges is not None:
            oracle["max_exchanges_per_cycle"] = args.max_exchanges
        if args.timeout_ms is not None:
            oracle["http_timeout_ms"] = args.timeout_ms
        if args.interval is not None:
            oracle["poll_every_seconds"] = args.interval
        oracle_config.validate_oracle_config(oracle)
        pairs = _parse_pairs(args.pair, list(oracle.get("pairs") or []))
        for pair in pairs:
            resolve_bounds(pair, cfg.get("bounds"))
        registry = build_registry(cfg.get("exchanges") or None)
    except (ValueError, KeyError, yaml.YAMLError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if args.list_exchanges:
        for ex in registry.all_exchanges():
            supported = ", ".join(p.display for p in TradingPair if ex.supports(p)) or "-"
            print(f"{ex.exchange_id:>3}  {ex.name:<28} {ex.protocol.protocol_name:<12} {supported}")
        return 0

    db_path = args.db or cfg["db"]["path"]
    interval = 1 if args.once else int(oracle["update_interval"])
    cycle_kwargs = dict(
        timeout_ms=int(oracle["http_timeout_ms"]),
        bounds_overrides=cfg.get("bounds") or {},
        max_exchanges=int(oracle["max_exchanges_per_cycle"]),
        max_workers=int(oracle["max_workers"]),
        log=logger,
    )

    logger.info(
        "Polling %s from %d exchanges into %s (every %ss, update_interval=%d)",
        ", ".join(p.display for p in pairs),
        min(len(registry), cycle_kwargs["max_exchanges"]),
        db_path,
        oracle["poll_every_seconds"],
        interval,
    )

    with get_oracle_context(db_path, registry=registry) as ctx:
        tick = 0
        try:
            while True:
                report = run_for_tick(
                    tick,
                    interval,
                    ctx.registry.all_exchanges(),
                    pairs,
                    store=ctx.store,
                    **cycle_kwargs,
                )
                if not report.skipped:
                    for ev in report.updates:
                        logger.info("stored %s #%d %s = %d", ev.exchange_name, ev.exchange_id, ev.pair, ev.price_micro)
                if args.once:
                    return 0 if report.ok_count > 0 else 1
                tick += 1
                time.sleep(float(oracle["poll_every_seconds"]))
        except KeyboardInterrupt:
            logger.info("Stopped.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
