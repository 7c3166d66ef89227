"""
MongoDB and Redis handles shared by the panel API.

Both clients are created on first use and live until `close_connections()`
runs at shutdown. MongoDB holds the bot's per-guild configuration and the
collections exposed to the dev DB admin; Redis only backs the `/api/me` cache.
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis

from panel_api.config import get_settings

logger = logging.getLogger(__name__)

MONGO_APP_NAME = "panel-api"

_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Get or create the MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(
            settings.mongodb_uri,
            appname=MONGO_APP_NAME,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        )
        logger.info("MongoDB client created (db=%s)", settings.mongodb_db)
    return _mongo_client


async def get_redis_client() -> Redis:
    """Get or create the Redis client used by the /api/me cache."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            decode_responses=True,
        )
    return _redis_client


async def get_database() -> AsyncIOMotorDatabase:
    """The panel database named by MONGODB_DB."""
    client = await get_mongo_client()
    return client[get_settings().mongodb_db]


async def close_connections():
    global _mongo_client, _redis_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None

    logger.info("Database connections closed")
