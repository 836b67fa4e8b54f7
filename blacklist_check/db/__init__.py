"""Database layer for the blacklist check service."""

from .blacklist_dao import BlacklistDAO
from .mongodb import (
    blacklist_collection,
    connect_to_mongodb,
    create_indexes,
    disconnect_from_mongodb,
    get_database,
)
from .redis_client import connect_to_redis, disconnect_from_redis

__all__ = [
    "get_database",
    "blacklist_collection",
    "connect_to_mongodb",
    "disconnect_from_mongodb",
    "create_indexes",
    "connect_to_redis",
    "disconnect_from_redis",
    "BlacklistDAO",
]
