#!/usr/bin/env python3
"""
Create the blacklist collection indexes.

The API also creates them on startup; run this ahead of a deployment or
after restoring a dump to avoid building indexes under traffic.
"""

import asyncio

from loguru import logger

from blacklist_check.db.mongodb import (
    blacklist_collection,
    connect_to_mongodb,
    disconnect_from_mongodb,
)
from blacklist_check.settings import Settings


async def setup_indexes() -> None:
    """Create indexes and list what the collection ends up with."""
    settings = Settings()
    # connect_to_mongodb creates the indexes as part of connecting
    await connect_to_mongodb(settings)
    try:
        existing_indexes = await blacklist_collection().list_indexes().to_list(length=None)
        logger.info("Current indexes:")
        for idx in existing_indexes:
            logger.info(f"  - {idx.get('name', 'unnamed')}: {dict(idx.get('key', {}))}")
    finally:
        await disconnect_from_mongodb()


if __name__ == "__main__":
    asyncio.run(setup_indexes())
