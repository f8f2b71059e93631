#!/usr/bin/env python3
"""
Create the conversation_state table for the SQL state store.

SqlStateStore creates its table lazily on first use; run this ahead of
time when the application's database user may not issue DDL.

Usage:
    python scripts/migrate_db.py                      # storage.url from settings
    python scripts/migrate_db.py --url postgresql://user:pw@db/concierge
    python scripts/migrate_db.py --check              # report only, no changes
"""
import argparse
import asyncio
import os
import sys

# Ensure app root is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _existing_tables(sync_conn) -> list[str]:
    from sqlalchemy import inspect
    return inspect(sync_conn).get_table_names()


async def run_migration(url: str = None, check_only: bool = False) -> int:
    from config.settings import load_settings
    settings = load_settings()

    from database.models import Base
    from database.session import close_db, get_engine, init_db

    url = url or settings.storage.url
    engine = get_engine(url)
    shown = str(engine.url)
    print(f"Database: {engine.dialect.name} ({shown.split('@')[-1]})")

    try:
        async with engine.connect() as conn:
            existing = await conn.run_sync(_existing_tables)
        missing = sorted(set(Base.metadata.tables) - set(existing))

        if check_only:
            print(f"Tables existing: {', '.join(existing) or '(none)'}")
            if missing:
                print(f"Tables MISSING: {', '.join(missing)}")
                return 1
            print("All tables exist.")
            return 0

        if not missing:
            print("Nothing to do.")
            return 0
        await init_db(url)
        print(f"Created: {', '.join(missing)}")
        return 0
    finally:
        await close_db()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create conversation state tables")
    parser.add_argument("--url", help="database URL (defaults to storage.url in settings)")
    parser.add_argument("--check", action="store_true", help="only report missing tables")
    args = parser.parse_args()
    sys.exit(asyncio.run(run_migration(args.url, args.check)))


if __name__ == "__main__":
    main()
