"""CLI entry point for cemtexer."""
from __future__ import annotations

from cemtexer.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
