"""Apply infra/migrations/*.sql in name order, once each.

Applied names are recorded in `schema_migrations`; every file runs in its own
transaction together with its bookkeeping row.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import psycopg

from clipscribe.config import Settings

_MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "infra" / "migrations"

_CREATE_LEDGER = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  name TEXT PRIMARY KEY,
  applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or update the ClipScribe schema.")
    parser.add_argument(
        "--status",
        action="store_true",
        help="List applied and pending migrations without applying anything",
    )
    return parser.parse_args()


def _pending(conn: psycopg.Connection, files: list[Path]) -> list[Path]:
    with conn.transaction():
        conn.execute(_CREATE_LEDGER)
        applied = {str(r[0]) for r in conn.execute("SELECT name FROM schema_migrations")}
    return [p for p in files if p.name not in applied]


def main() -> None:
    args = _parse_args()
    files = sorted(_MIGRATIONS_DIR.glob("*.sql"))
    if not files:
        raise SystemExit(f"no migrations in {_MIGRATIONS_DIR}")

    with psycopg.connect(Settings().database_url, autocommit=True) as conn:
        pending = _pending(conn, files)

        if args.status:
            for path in files:
                print(f"{'pending' if path in pending else 'applied':8} {path.name}")
            return

        for path in pending:
            with conn.transaction():
                conn.execute(path.read_text(encoding="utf-8"))
                conn.execute("INSERT INTO schema_migrations (name) VALUES (%s)", (path.name,))
            print(f"applied {path.name}")
        if not pending:
            print("database is up to date")


if __name__ == "__main__":
    main()
