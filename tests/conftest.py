"""Pytest configuration and fixtures"""
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from gomarketplace.cart import CartStore, MemoryStorage

@pytest.fixture
def sample_product():
    """Sample product descriptor (no quantity)"""
    return {
        "id": "A",
        "title": "Shoe",
        "image_url": "u",
        "price": 100,
    }


@pytest.fixture
def other_product():
    """Second product descriptor"""
    return {
        "id": "B",
        "title": "Backpack",
        "image_url": "https://cdn.example.com/backpack.png",
        "price": "59.90",
    }


@pytest.fixture
def memory_storage():
    """Empty in-memory storage"""
    return MemoryStorage()


@pytest_asyncio.fixture
async def store(memory_storage):
    """Loaded cart store over empty in-memory storage"""
    cart_store = CartStore(memory_storage)
    await cart_store.load()
    return cart_store


@pytest.fixture
def mock_redis():
    """Mock async Upstash Redis client"""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    return redis
