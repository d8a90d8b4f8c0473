"""Allow python -m dex_oracle to print help."""
from __future__ import annotations

from . import __version__

_HELP = f"""\
dex-oracle {__version__}

Available commands:
  dex-oracle-poll                   Poll DEX pools every tick into SQLite
  dex-oracle-poll --once            Run one fetch cycle and exit
  dex-oracle-poll --list-exchanges  Show the exchange registry

Or directly:
  python -m dex_oracle.cli.poll     Same as dex-oracle-poll
  python -m pytest -q               Run test suite
"""


def main() -> int:
    print(_HELP)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
