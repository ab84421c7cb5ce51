"""
Client factories for MongoDB and Redis.

Both clients are created lazily and cached at module level. Neither call
performs network I/O, so building them at startup is safe even when the
servers are still coming up.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis, from_url

from .config import get_settings

# Module-level client cache
_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None


def get_mongo_client() -> AsyncIOMotorClient:
    """
    Get the shared MongoDB client.

    Returns:
        Motor client configured from MONGO_URI
    """
    global _mongo_client

    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(settings.mongo_uri, tz_aware=True)

    return _mongo_client


def get_database() -> AsyncIOMotorDatabase:
    """Get the application database (MONGO_DB_NAME)."""
    settings = get_settings()
    return get_mongo_client()[settings.mongo_db_name]


def get_redis_client() -> Redis:
    """
    Get the shared Redis client.

    Responses are decoded to str so stored values round-trip as text.
    """
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        _redis_client = from_url(settings.redis_uri, decode_responses=True)

    return _redis_client


async def close_clients() -> None:
    """Close cached clients (called on application shutdown)."""
    global _mongo_client, _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None


def reset_client_cache() -> None:
    """
    Reset the cached clients without closing them.

    Useful for testing or when configuration changes.
    """
    global _mongo_client, _redis_client
    _mongo_client = None
    _redis_client = None
