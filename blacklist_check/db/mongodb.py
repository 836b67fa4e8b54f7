"""
MongoDB connection and collection management.

This module provides MongoDB database connection using Motor
(async MongoDB driver) and manages the blacklist collection.
"""

import logging
from typing import Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING

from ..settings import Settings

logger = logging.getLogger(__name__)

# Global database client and database instances
_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None
_collection_name: str = "blacklist"


async def connect_to_mongodb(
    settings: Optional[Settings] = None,
) -> AsyncIOMotorDatabase:
    """
    Connect to MongoDB and return database instance.

    :param settings: Application settings (optional)
    :return: MongoDB database instance
    """
    global _client, _database, _collection_name

    if _database is not None:
        return _database

    if settings is None:
        settings = Settings()

    try:
        _client = AsyncIOMotorClient(
            str(settings.mongo_url),
            serverSelectionTimeoutMS=5000,  # 5 second timeout
            connectTimeoutMS=10000,  # 10 second timeout
            socketTimeoutMS=10000,  # 10 second timeout
            tz_aware=True,
        )

        _database = _client[settings.mongo_database]
        _collection_name = settings.mongo_collection

        # Test connection by pinging the specific database
        await _database.command("ping")
        logger.info(
            f"Successfully connected to MongoDB at {settings.mongo_host}:{settings.mongo_port}, "
            f"db: {settings.mongo_database}",
        )

        await create_indexes()

        return _database

    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        if _client is not None:
            _client.close()
        _client = None
        _database = None
        raise


async def disconnect_from_mongodb() -> None:
    """Disconnect from MongoDB."""
    global _client, _database

    if _client:
        _client.close()
        _client = None
        _database = None
        logger.info("Disconnected from MongoDB")


def get_database() -> AsyncIOMotorDatabase:
    """
    Get the current database instance.

    :return: MongoDB database instance
    :raises RuntimeError: If not connected to database
    """
    if _database is None:
        raise RuntimeError(
            "Not connected to database. Call connect_to_mongodb() first.",
        )
    return _database


def blacklist_collection(
    database: Optional[AsyncIOMotorDatabase] = None,
) -> AsyncIOMotorCollection:
    """
    Get the blacklist collection.

    :param database: Database to use instead of the global one (optional)
    :return: Blacklist collection instance
    """
    if database is None:
        database = get_database()
    return database[_collection_name]


async def create_indexes(database: Optional[AsyncIOMotorDatabase] = None) -> None:
    """
    Create the indexes the blacklist lookups rely on.

    - nik: exact lookups (unique where present)
    - name_trigrams: multikey index backing the similarity pre-filter
    - birth_date: exact date narrowing
    """
    collection = blacklist_collection(database)
    logger.info("Creating blacklist query indexes...")

    await collection.create_index(
        [("nik", ASCENDING)],
        name="nik_unique_index",
        unique=True,
        partialFilterExpression={"nik": {"$type": "string"}},
    )
    await collection.create_index(
        [("name_trigrams", ASCENDING)],
        name="name_trigrams_index",
    )
    await collection.create_index(
        [("birth_date", ASCENDING)],
        name="birth_date_index",
    )
    await collection.create_index(
        [("name_trigrams", ASCENDING), ("birth_date", ASCENDING)],
        name="name_trigrams_birth_date_index",
    )
    await collection.create_index(
        [("created_at", DESCENDING)],
        name="created_at_index",
    )

    logger.info("Successfully created database indexes")
