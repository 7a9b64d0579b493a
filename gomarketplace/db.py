"""
Storage Module - Redis client and cart storage factory

Provides:
- A singleton async Upstash Redis client
- create_storage(), which builds the backend selected in Settings
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from gomarketplace.config import Settings, StorageBackend
from gomarketplace.errors import ERROR_REDIS_NOT_CONFIGURED, ERROR_UNKNOWN_BACKEND
from gomarketplace.logging import get_logger

logger = get_logger(__name__)

# Singleton instance
_redis_client: Optional[AsyncRedis] = None


def get_redis(settings: Settings) -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Raises:
        ValueError: If UPSTASH_REDIS_REST_URL or UPSTASH_REDIS_REST_TOKEN is missing
    """
    global _redis_client

    if _redis_client is None:
        if not settings.redis_url or not settings.redis_token:
            raise ValueError(ERROR_REDIS_NOT_CONFIGURED)
        _redis_client = AsyncRedis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


def create_storage(settings: Settings):
    """
    Build the cart storage backend selected by settings.backend.

    Returns:
        A KeyValueStorage implementation

    Raises:
        ValueError: If the backend is unknown or Redis is not configured
    """
    # Imported lazily: gomarketplace.cart.provider imports this module
    from gomarketplace.cart.storage import FileStorage, MemoryStorage, RedisStorage

    if settings.backend == StorageBackend.MEMORY:
        storage = MemoryStorage()
    elif settings.backend == StorageBackend.FILE:
        storage = FileStorage(settings.storage_dir)
    elif settings.backend == StorageBackend.REDIS:
        storage = RedisStorage(get_redis(settings), ttl_seconds=settings.ttl_seconds)
    else:
        raise ValueError(f"{ERROR_UNKNOWN_BACKEND}: {settings.backend}")

    logger.info(f"Cart storage backend: {settings.backend.value}")
    return storage
