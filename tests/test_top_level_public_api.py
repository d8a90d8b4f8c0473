"""
Tests for the top-level public API (dex_oracle/__init__.py).
Ensures __version__, __all__, and facade re-exports are present and that importing does not pull cli.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parent.parent

# Expected top-level __all__ (must match dex_oracle/__init__.py exactly).
EXPECTED_TOP_LEVEL_ALL = {
    "__version__",
    "Exchange",
    "ExchangeRegistry",
    "OracleError",
    "PriceBounds",
    "PricePoint",
    "TradingPair",
    "bounds_for",
    "build_registry",
    "display",
    "hash_of",
}


def test_top_level_has_version():
    """dex_oracle exposes __version__ as non-empty string equal to 0.1.0."""
    import dex_oracle as dx

    assert isinstance(dx.__version__, str)
    assert dx.__version__ == "0.1.0"


def test_top_level_has_explicit_all():
    """dex_oracle has __all__ and it matches the expected set exactly."""
    import dex_oracle as dx

    assert set(dx.__all__) == EXPECTED_TOP_LEVEL_ALL


def test_top_level_each_all_name_exported():
    """For each name in __all__, dex_oracle has that attribute."""
    import dex_oracle as dx

    for name in dx.__all__:
        assert hasattr(dx, name), f"dex_oracle must export {name!r} (in __all__)"


def test_facade_functions_agree_with_pair_properties():
    import dex_oracle as dx

    pair = dx.TradingPair.ETH_USD
    assert dx.display(pair) == pair.display == "ETH/USD"
    assert dx.hash_of(pair) == pair.hash
    assert dx.bounds_for(pair) == pair.bounds


def test_import_does_not_pull_cli():
    """Importing dex_oracle in a fresh interpreter must not import dex_oracle.cli."""
    code = "import sys, dex_oracle; print('dex_oracle.cli' in sys.modules)"
    r = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, timeout=30, cwd=_REPO_ROOT)
    assert r.returncode == 0, r.stderr
    assert r.stdout.strip() == "False"
