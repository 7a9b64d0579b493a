"""
Key-value storage backends for the persisted cart.

Every backend offers the same three async operations the cart store needs:
get, set and remove of a single string value per key.
"""
import asyncio
import os
from pathlib import Path
from typing import Dict, Optional, Protocol, Union
from urllib.parse import quote


class KeyValueStorage(Protocol):
    """Async key-value storage used to survive restarts."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """
    One file per key under a directory on the local device.

    Keys are percent-encoded into file names, so "@GoMarketplace:products"
    is stored as "%40GoMarketplace%3Aproducts.json". Blocking file I/O runs
    in a worker thread.
    """

    def __init__(self, storage_dir: Union[str, Path]):
        self.storage_dir = Path(storage_dir)

    def _file_path(self, key: str) -> Path:
        return self.storage_dir / f"{quote(key, safe='')}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self._file_path(key)
        if not path.exists():
            return None
        text = path.read_text(encoding="utf-8")
        return text if text.strip() else None

    def _write(self, key: str, value: str) -> None:
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        path = self._file_path(key)
        # Write then rename so a crash never leaves a half-written cart
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)

    def _delete(self, key: str) -> None:
        self._file_path(key).unlink(missing_ok=True)

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._delete, key)


class RedisStorage:
    """
    Storage on top of the async Upstash Redis client.

    Usage:
        storage = RedisStorage(get_redis(settings), ttl_seconds=86400)
    """

    def __init__(self, redis, ttl_seconds: Optional[int] = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    async def get(self, key: str) -> Optional[str]:
        value = await self.redis.get(key)
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        if self.ttl_seconds:
            await self.redis.set(key, value, ex=self.ttl_seconds)
        else:
            await self.redis.set(key, value)

    async def remove(self, key: str) -> None:
        await self.redis.delete(key)


__all__ = [
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "RedisStorage",
]
