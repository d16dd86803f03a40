#!/usr/bin/env python3
"""
Create, drop or inspect the catalog tables.

Tables are created automatically at startup only in development and for
SQLite; deployments against PostgreSQL run this script once.

Usage:
    python scripts/init_database.py            # create tables
    python scripts/init_database.py status     # list tables and row counts
    python scripts/init_database.py drop       # drop all tables (asks first)

    # With another environment file
    ENV_FILE=.env.production python scripts/init_database.py

Environment Variables:
    DATABASE_URL - Full connection string, or
    DATABASE_HOST, DATABASE_PORT, DATABASE_NAME, DATABASE_USER, DATABASE_PASSWORD
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from sqlalchemy import func, inspect, select

# Configure logging for CLI output
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def _database_manager():
    from app.core.config import Settings
    from app.core.db_client import DatabaseManager

    env_path = project_root / os.environ.get("ENV_FILE", ".env")
    if env_path.exists():
        logger.info(f"Loading environment from: {env_path}")
    else:
        logger.warning(f"No environment file found at: {env_path}")
    return DatabaseManager(Settings(_env_file=env_path if env_path.exists() else None))


async def _require_connection(db) -> None:
    if not await db.test_connection():
        logger.error("Could not connect to database")
        logger.error("Check DATABASE_URL or the DATABASE_* settings")
        await db.close()
        sys.exit(1)


async def init_tables():
    """Create all catalog tables."""
    db = _database_manager()
    logger.info("=== Catalog Database Initialization ===")

    await _require_connection(db)

    logger.info("Creating tables...")
    await db.create_tables()

    async with db.engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    for table_name in tables:
        logger.info(f"  - {table_name}")

    await db.close()
    logger.info("=== Initialization Complete ===")


async def drop_tables():
    """Drop all tables (use with caution!)."""
    db = _database_manager()
    logger.warning("=== WARNING: Dropping All Tables ===")

    confirm = input("Are you sure you want to drop all tables? (type 'yes' to confirm): ")
    if confirm.lower() != "yes":
        logger.info("Aborted.")
        return

    await db.drop_tables()
    logger.info("All tables dropped.")
    await db.close()


async def show_status():
    """Show row counts for each catalog table."""
    from app.models.db_models import Base

    db = _database_manager()
    logger.info("=== Database Status ===")

    await _require_connection(db)

    async with db.engine.connect() as conn:
        existing = await conn.run_sync(
            lambda sync_conn: set(inspect(sync_conn).get_table_names())
        )
        for table in Base.metadata.sorted_tables:
            if table.name not in existing:
                logger.info(f"  - {table.name}: missing")
                continue
            count = (await conn.execute(select(func.count()).select_from(table))).scalar()
            logger.info(f"  - {table.name}: {count} rows")

    await db.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Manage the OpenShelf catalog tables")
    parser.add_argument(
        "command",
        nargs="?",
        default="init",
        choices=["init", "drop", "status"],
        help="Command to run (default: init)"
    )

    args = parser.parse_args()

    if args.command == "init":
        asyncio.run(init_tables())
    elif args.command == "drop":
        asyncio.run(drop_tables())
    elif args.command == "status":
        asyncio.run(show_status())


if __name__ == "__main__":
    main()
