#!/usr/bin/env python3
"""
Wallet Admin database setup script

Supports:
- init: First-time schema creation
- reset: Drop and recreate tables (--mode=data|schema)
- verify: Check DB connectivity and schema
- seed: Add demo data (--demo)

Usage:
    uv run db-init-demo
    uv run db-reset-schema
    uv run db-verify
    python scripts/setup_database.py seed --demo

Environment Variables:
- DATABASE_URL_ADMIN: Admin connection with schema creation permissions (primary)
- DATABASE_URL: Fallback
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import psycopg
from psycopg.rows import dict_row

SCHEMA = "custody"
# Drop/truncate order respects the foreign key from transactions to accounts
TABLES = ["wallet_transactions", "accounts"]
EXPECTED_CONSTRAINTS = [
    "accounts_balance_non_negative",
    "wallet_transactions_amount_positive",
    "wallet_transactions_status_check",
]


@dataclass
class SetupResult:
    """Result of a setup step."""

    success: bool
    message: str
    details: str | None = None


class ResetMode(Enum):
    """Database reset modes."""

    SCHEMA = "schema"
    DATA = "data"


class DatabaseSetup:
    """Handles database setup for the wallet admin service."""

    def __init__(self, admin_url: str):
        self.admin_url = admin_url
        self.repo_root = Path(__file__).parent.parent

    def _load_sql_file(self, filename: str) -> str:
        """Load SQL file from db directory."""
        sql_path = self.repo_root / "db" / filename
        if not sql_path.exists():
            raise FileNotFoundError(f"SQL file not found: {sql_path}")
        return sql_path.read_text(encoding="utf-8")

    def _execute_sql(
        self, conn: psycopg.Connection, sql_content: str, description: str
    ) -> SetupResult:
        """Execute a SQL script in one transaction."""
        try:
            # No bind parameters, so psycopg sends the whole script at once
            conn.execute(sql_content)
            conn.commit()
            return SetupResult(success=True, message=description, details="OK")
        except psycopg.Error as e:
            conn.rollback()
            return SetupResult(
                success=False,
                message=description,
                details=f"{type(e).__name__}: {e}",
            )

    def _apply(self, conn: psycopg.Connection, filename: str, description: str) -> bool:
        result = self._execute_sql(conn, self._load_sql_file(filename), description)
        if not result.success:
            print(f"ERROR: {result.message}: {result.details}")
            return False
        print(f"  Applied {filename}")
        return True

    def init(self, demo: bool = False) -> int:
        """Initialize database schema."""
        print("Initializing database schema...")

        try:
            with psycopg.connect(self.admin_url, autocommit=False) as conn:
                if not self._apply(conn, "schema.sql", "Schema creation failed"):
                    return 1
                if demo and not self._apply(conn, "seed_demo.sql", "Demo data insertion failed"):
                    return 1
        except psycopg.Error as e:
            print(f"ERROR: Database connection failed: {e}")
            return 1

        print("Database initialization complete.")
        return 0

    def reset(self, mode: ResetMode, force: bool = False) -> int:
        """Reset database tables (schema or data mode)."""
        print(f"Resetting database tables ({mode.value})...")

        if not force:
            response = input("This will destroy all account and transaction data. Continue? [y/N]: ")
            if response.lower() != "y":
                print("Aborted.")
                return 1

        try:
            with psycopg.connect(self.admin_url, autocommit=False) as conn:
                if mode == ResetMode.SCHEMA:
                    for table in TABLES:
                        conn.execute(f"DROP TABLE IF EXISTS {SCHEMA}.{table} CASCADE")
                    conn.commit()
                    print("  Tables dropped.")
                    if not self._apply(conn, "schema.sql", "Schema recreation failed"):
                        return 1
                else:
                    for table in TABLES:
                        conn.execute(f"TRUNCATE TABLE {SCHEMA}.{table} CASCADE")
                    conn.commit()
                    print("  Tables truncated.")
        except psycopg.Error as e:
            print(f"ERROR: Database reset failed: {e}")
            return 1

        print("Database reset complete.")
        return 0

    def seed(self, demo: bool = False) -> int:
        """Apply seed data."""
        if not demo:
            print("  No demo data specified. Use --demo flag.")
            return 1

        try:
            with psycopg.connect(self.admin_url, autocommit=False) as conn:
                if not self._apply(conn, "seed_demo.sql", "Demo data insertion failed"):
                    return 1
        except psycopg.Error as e:
            print(f"ERROR: Database seed failed: {e}")
            return 1

        print("Demo data seeded.")
        return 0

    def verify(self) -> int:
        """Verify database setup."""
        print("Verifying database setup...")

        errors: list[str] = []

        try:
            with psycopg.connect(self.admin_url, autocommit=True, row_factory=dict_row) as conn:
                print("  [OK] Database connection")

                rows = conn.execute(
                    """
                    SELECT table_name FROM information_schema.tables
                    WHERE table_schema = %s AND table_name = ANY(%s)
                    """,
                    (SCHEMA, TABLES),
                ).fetchall()
                tables = {row["table_name"] for row in rows}
                missing = [t for t in TABLES if t not in tables]
                if missing:
                    errors.append(f"Missing tables: {missing}")
                else:
                    print(f"  [OK] Tables exist: {', '.join(sorted(tables))}")

                rows = conn.execute(
                    """
                    SELECT conname FROM pg_constraint c
                    JOIN pg_namespace n ON n.oid = c.connamespace
                    WHERE n.nspname = %s AND conname = ANY(%s)
                    """,
                    (SCHEMA, EXPECTED_CONSTRAINTS),
                ).fetchall()
                constraints = {row["conname"] for row in rows}
                missing = [c for c in EXPECTED_CONSTRAINTS if c not in constraints]
                if missing:
                    errors.append(f"Missing constraints: {missing}")
                else:
                    print(f"  [OK] Constraints: {len(constraints)}")
        except psycopg.Error as e:
            errors.append(f"Schema check failed: {e}")

        if errors:
            print("\nVerification FAILED:")
            for err in errors:
                print(f"  - {err}")
            return 1

        print("\nVerification PASSED.")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Wallet Admin - Database Setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--admin-url", help="Admin database URL (overrides env var)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="First-time setup")
    init_parser.add_argument("--demo", action="store_true", help="Include demo data")

    reset_parser = subparsers.add_parser("reset", help="Reset database")
    reset_parser.add_argument(
        "--mode",
        choices=["schema", "data"],
        default="schema",
        help="Reset mode: schema (drop/recreate) or data (truncate only)",
    )
    reset_parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    seed_parser = subparsers.add_parser("seed", help="Apply seed data")
    seed_parser.add_argument("--demo", action="store_true", help="Include demo data")

    subparsers.add_parser("verify", help="Verify database setup")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    admin_url = args.admin_url or os.getenv("DATABASE_URL_ADMIN") or os.getenv("DATABASE_URL")
    if not admin_url:
        print("ERROR: DATABASE_URL_ADMIN is required")
        print("Set it as environment variable or via --admin-url")
        return 2

    setup = DatabaseSetup(admin_url=admin_url)

    if args.command == "init":
        return setup.init(demo=args.demo)
    elif args.command == "reset":
        return setup.reset(mode=ResetMode(args.mode), force=args.yes)
    elif args.command == "seed":
        return setup.seed(demo=args.demo)
    elif args.command == "verify":
        return setup.verify()

    return 0


if __name__ == "__main__":
    sys.exit(main())
