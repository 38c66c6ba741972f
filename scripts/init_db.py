"""Create the ledger tables in the configured database."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Create the accounts and ledger_entries tables if they are missing.",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Override DATABASE_URL from the environment.",
    )
    return parser.parse_args()


def init_db(database_url: str | None = None) -> list[str]:
    """Create missing tables and return the table names now present."""
    from sqlalchemy import inspect

    from app.config import settings
    from app.db.database import Database

    config = settings.model_copy(update={"database_url": database_url}) if database_url else settings
    db = Database.from_settings(config)
    try:
        db.create_schema()
        return sorted(inspect(db.engine).get_table_names())
    finally:
        db.close()


def main() -> None:
    """CLI entry point."""
    args = parse_args()
    tables = init_db(args.database_url)
    print(f"Schema ready ({len(tables)} table(s)):")
    for name in tables:
        print(name)


if __name__ == "__main__":
    main()
