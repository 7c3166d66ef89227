"""
Database module - MongoDB and Redis connections and collection names.
"""
from panel_api.database.connections import (
    get_mongo_client,
    get_redis_client,
    close_connections,
    get_database,
)
from panel_api.database.collections import Collections, create_indexes

__all__ = [
    "get_mongo_client",
    "get_redis_client",
    "close_connections",
    "get_database",
    "Collections",
    "create_indexes",
]
