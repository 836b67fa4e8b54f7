"""Application lifespan management for MongoDB and Redis connections."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from loguru import logger
from redis.exceptions import RedisError

from blacklist_check.db.blacklist_dao import BlacklistDAO
from blacklist_check.db.mongodb import connect_to_mongodb, disconnect_from_mongodb
from blacklist_check.db.redis_client import connect_to_redis, disconnect_from_redis
from blacklist_check.services.blacklist_checker import build_blacklist_checker
from blacklist_check.settings import settings


@asynccontextmanager
async def lifespan_setup(
    app: FastAPI,
) -> AsyncGenerator[None, None]:  # pragma: no cover
    """
    Actions to run on application startup.

    This function initializes the MongoDB connection (required) and the
    Redis cache connection (optional), then wires the blacklist checker.

    :param app: the fastAPI application.
    :return: function that actually performs actions.
    """

    try:
        logger.info("Initializing MongoDB connection...")
        database = await connect_to_mongodb(settings)
        logger.info("MongoDB connection established successfully")
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise

    redis_client = None
    try:
        logger.info("Initializing Redis connection...")
        redis_client = await connect_to_redis(settings)
        logger.info("Redis connection established successfully")
    except RedisError as e:
        logger.warning(f"Redis unavailable, blacklist checks will bypass the cache: {e}")

    dao = BlacklistDAO.from_settings(settings, database=database)
    app.state.blacklist_checker = build_blacklist_checker(settings, dao, redis_client)
    app.state.blacklist_dao = dao

    yield

    # Cleanup on shutdown
    try:
        logger.info("Closing Redis connection...")
        await disconnect_from_redis()
        logger.info("Closing MongoDB connection...")
        await disconnect_from_mongodb()
        logger.info("Connections closed")
    except Exception as e:
        logger.error(f"Error closing connections: {e}")
