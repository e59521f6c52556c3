"""
Database setup commands.

These commands wrap scripts/setup_database.py. The connection URL comes from
DATABASE_URL_ADMIN (or DATABASE_URL) in the environment.

Usage:
    uv run db-init          # First-time setup
    uv run db-init-demo     # First-time setup with demo accounts
    uv run db-reset-data    # Truncate tables
    uv run db-reset-schema  # Drop and recreate tables
    uv run db-verify        # Verify setup
"""

from __future__ import annotations

import sys
from pathlib import Path

from cli._runner import run

_SETUP_DB_SCRIPT = Path(__file__).parent.parent / "scripts" / "setup_database.py"


def _setup_database(*args: str) -> int:
    return run([sys.executable, str(_SETUP_DB_SCRIPT), *args])


def init() -> None:
    sys.exit(_setup_database("init"))


def init_demo() -> None:
    sys.exit(_setup_database("init", "--demo"))


def reset_data() -> None:
    sys.exit(_setup_database("reset", "--mode", "data", "--yes"))


def reset_schema() -> None:
    sys.exit(_setup_database("reset", "--mode", "schema", "--yes"))


def verify() -> None:
    sys.exit(_setup_database("verify"))
