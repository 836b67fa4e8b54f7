#!/usr/bin/env python3
"""
Import blacklist records into MongoDB.

Usage:
    python scripts/import_blacklist.py records.csv --dry-run   # validate only
    python scripts/import_blacklist.py records.json            # upsert records
"""

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from blacklist_check.db.blacklist_dao import BlacklistDAO
from blacklist_check.db.mongodb import connect_to_mongodb, disconnect_from_mongodb
from blacklist_check.settings import Settings
from blacklist_check.utils.record_import import read_records


async def main() -> int:
    """Main import script entry point."""
    parser = argparse.ArgumentParser(description="Import blacklist records into MongoDB")
    parser.add_argument("path", type=Path, help="CSV or JSON file with blacklist records")
    parser.add_argument("--dry-run", action="store_true", help="Validate the file without writing")
    args = parser.parse_args()

    records, errors = read_records(args.path)
    for error in errors:
        logger.warning(error)
    logger.info(f"Parsed {len(records)} records ({len(errors)} skipped) from {args.path}")

    if args.dry_run:
        logger.info("Dry run, nothing written")
        return 0 if not errors else 1

    settings = Settings()
    database = await connect_to_mongodb(settings)
    try:
        dao = BlacklistDAO.from_settings(settings, database=database)
        stats = {"inserted": 0, "updated": 0}
        for record in records:
            stats[await dao.upsert_record(record)] += 1
        logger.info(f"Import finished: {stats['inserted']} inserted, {stats['updated']} updated")
    finally:
        await disconnect_from_mongodb()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
