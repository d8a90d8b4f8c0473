"""
Load config from config.yaml with optional env overrides.
Single source of truth for DB path, oracle cadence, timeouts, bounds and
exchange declarations.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# Defaults if no YAML or env
_DEFAULTS: Dict[str, Any] = {
    "db": {"path": "oracle_prices.sqlite"},
    "oracle": {
        "update_interval": 3,
        "http_timeout_ms": 5000,
        "max_exchanges_per_cycle": 5,
        "max_workers": 1,
        "poll_every_seconds": 12,
        "pairs": ["ETH/USD"],
    },
    "bounds": {},
    "exchanges": [],
}

MIN_TIMEOUT_MS = 1
MAX_TIMEOUT_MS = 60_000


def _config_yaml_path() -> Path:
    """DEX_ORACLE_CONFIG if set, else config.yaml at repo root (parent of package dir)."""
    env_path = os.environ.get("DEX_ORACLE_CONFIG")
    if env_path:
        return Path(env_path)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def load_yaml(path: Optional[Path] = None) -> dict:
    config_path = path or _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    path = os.environ.get("DEX_ORACLE_DB_PATH")
    if path:
        overrides.setdefault("db", {})["path"] = path
    timeout = os.environ.get("DEX_ORACLE_HTTP_TIMEOUT_MS")
    if timeout:
        overrides.setdefault("oracle", {})["http_timeout_ms"] = int(timeout)
    max_ex = os.environ.get("DEX_ORACLE_MAX_EXCHANGES")
    if max_ex:
        overrides.setdefault("oracle", {})["max_exchanges_per_cycle"] = int(max_ex)
    return overrides


def get_config(path: Optional[Path] = None) -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, load_yaml(path))
    merged = _deep_merge(merged, _env_overrides())
    return merged


def validate_oracle_config(oracle: Dict[str, Any]) -> None:
    timeout = int(oracle["http_timeout_ms"])
    if not MIN_TIMEOUT_MS <= timeout <= MAX_TIMEOUT_MS:
        raise ValueError(f"http_timeout_ms must be in [{MIN_TIMEOUT_MS}, {MAX_TIMEOUT_MS}], got {timeout}")
    if int(oracle["update_interval"]) < 1:
        raise ValueError("update_interval must be >= 1")
    if int(oracle["max_exchanges_per_cycle"]) < 1:
        raise ValueError("max_exchanges_per_cycle must be >= 1")
    if int(oracle["max_workers"]) < 1:
        raise ValueError("max_workers must be >= 1")


# Convenience accessors
def db_path() -> str:
    return get_config()["db"]["path"]


def update_interval() -> int:
    return int(get_config()["oracle"]["update_interval"])


def http_timeout_ms() -> int:
    return int(get_config()["oracle"]["http_timeout_ms"])


def max_exchanges_per_cycle() -> int:
    return int(get_config()["oracle"]["max_exchanges_per_cycle"])


def max_workers() -> int:
    return int(get_config()["oracle"]["max_workers"])


def poll_every_seconds() -> float:
    return float(get_config()["oracle"]["poll_every_seconds"])


def oracle_pairs() -> List[str]:
    return list(get_config()["oracle"].get("pairs") or _DEFAULTS["oracle"]["pairs"])


def bounds_overrides() -> Dict[str, Any]:
    return dict(get_config().get("bounds") or {})


def exchange_declarations() -> List[Dict[str, Any]]:
    return list(get_config().get("exchanges") or [])
