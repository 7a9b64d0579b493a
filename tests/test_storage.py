"""
Tests for storage backends and the storage factory
"""

import pytest
from pathlib import Path
from unittest.mock import Mock

import gomarketplace.db as db
from gomarketplace.cart import FileStorage, MemoryStorage, RedisStorage
from gomarketplace.config import Settings, StorageBackend
from gomarketplace.db import create_storage, get_redis

KEY = "@GoMarketplace:products"


@pytest.fixture(autouse=True)
def reset_redis_singleton(monkeypatch):
    monkeypatch.setattr(db, "_redis_client", None)


class TestMemoryStorage:

    @pytest.mark.asyncio
    async def test_set_get_remove(self):
        """Test set get remove."""
        storage = MemoryStorage()

        assert await storage.get(KEY) is None
        await storage.set(KEY, "[]")
        assert await storage.get(KEY) == "[]"
        await storage.remove(KEY)
        assert await storage.get(KEY) is None

    @pytest.mark.asyncio
    async def test_remove_missing_key(self):
        """Test remove missing key."""
        await MemoryStorage().remove(KEY)


class TestFileStorage:

    @pytest.mark.asyncio
    async def test_set_get_remove(self, tmp_path):
        """Test set get remove."""
        storage = FileStorage(tmp_path / "storage")

        await storage.set(KEY, '[{"id": "A"}]')
        assert await storage.get(KEY) == '[{"id": "A"}]'

        await storage.remove(KEY)
        assert await storage.get(KEY) is None

    @pytest.mark.asyncio
    async def test_key_is_encoded_in_file_name(self, tmp_path):
        """Test key is encoded in file name."""
        storage = FileStorage(tmp_path)

        await storage.set(KEY, "[]")

        assert [p.name for p in Path(tmp_path).iterdir()] == ["%40GoMarketplace%3Aproducts.json"]

    @pytest.mark.asyncio
    async def test_blank_file_reads_as_missing(self, tmp_path):
        """Test blank file reads as missing."""
        (tmp_path / "%40GoMarketplace%3Aproducts.json").write_text("  \n", encoding="utf-8")

        assert await FileStorage(tmp_path).get(KEY) is None

    @pytest.mark.asyncio
    async def test_remove_missing_file(self, tmp_path):
        """Test remove missing file."""
        await FileStorage(tmp_path / "missing").remove(KEY)


class TestRedisStorage:

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self, mock_redis):
        """Test get decodes bytes."""
        mock_redis.get.return_value = b"[]"

        assert await RedisStorage(mock_redis).get(KEY) == "[]"
        mock_redis.get.assert_awaited_once_with(KEY)

    @pytest.mark.asyncio
    async def test_set_without_ttl(self, mock_redis):
        """Test set without ttl."""
        await RedisStorage(mock_redis).set(KEY, "[]")

        mock_redis.set.assert_awaited_once_with(KEY, "[]")

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, mock_redis):
        """Test set with ttl."""
        await RedisStorage(mock_redis, ttl_seconds=3600).set(KEY, "[]")

        mock_redis.set.assert_awaited_once_with(KEY, "[]", ex=3600)

    @pytest.mark.asyncio
    async def test_remove_deletes_key(self, mock_redis):
        """Test remove deletes key."""
        await RedisStorage(mock_redis).remove(KEY)

        mock_redis.delete.assert_awaited_once_with(KEY)


class TestCreateStorage:

    def test_memory_backend(self):
        """Test memory backend."""
        assert isinstance(create_storage(Settings()), MemoryStorage)

    def test_file_backend(self, tmp_path):
        """Test file backend."""
        storage = create_storage(Settings(backend=StorageBackend.FILE, storage_dir=tmp_path))

        assert isinstance(storage, FileStorage)
        assert storage.storage_dir == tmp_path

    def test_redis_backend(self, monkeypatch):
        """Test redis backend."""
        client_cls = Mock()
        monkeypatch.setattr(db, "AsyncRedis", client_cls)
        settings = Settings(
            backend=StorageBackend.REDIS,
            redis_url="https://test.upstash.io",
            redis_token="token",
            ttl_seconds=60,
        )

        storage = create_storage(settings)

        assert isinstance(storage, RedisStorage)
        assert storage.ttl_seconds == 60
        client_cls.assert_called_once_with(url="https://test.upstash.io", token="token")

    def test_redis_backend_requires_credentials(self):
        """Test redis backend requires credentials."""
        with pytest.raises(ValueError):
            create_storage(Settings(backend=StorageBackend.REDIS))

    def test_redis_client_is_singleton(self, monkeypatch):
        """Test redis client is singleton."""
        monkeypatch.setattr(db, "AsyncRedis", Mock(side_effect=lambda **kwargs: object()))
        settings = Settings(redis_url="https://test.upstash.io", redis_token="token")

        assert get_redis(settings) is get_redis(settings)
