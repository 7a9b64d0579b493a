"""Cart storage configuration from environment variables."""
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Key used by the marketplace client since the first release
DEFAULT_STORAGE_KEY = "@GoMarketplace:products"
DEFAULT_STORAGE_DIR = "data/storage"


class StorageBackend(str, Enum):
    """Where the cart blob is persisted."""
    MEMORY = "memory"  # Process memory, lost on restart
    FILE = "file"  # JSON file on the local device
    REDIS = "redis"  # Upstash Redis over REST


@dataclass(frozen=True)
class Settings:
    """Resolved cart settings."""
    backend: StorageBackend = StorageBackend.MEMORY
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_dir: Path = Path(DEFAULT_STORAGE_DIR)
    ttl_seconds: Optional[int] = None
    redis_url: str = ""
    redis_token: str = ""

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """
        Read settings from the environment.

        A `.env` file is loaded first when present; variables already set in
        the process environment win over it.

        Raises:
            ValueError: If CART_STORAGE_BACKEND or CART_TTL_SECONDS is invalid
        """
        load_dotenv(env_file)

        backend_name = os.environ.get("CART_STORAGE_BACKEND", StorageBackend.MEMORY.value)
        try:
            backend = StorageBackend(backend_name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown cart storage backend: {backend_name}")

        ttl_raw = os.environ.get("CART_TTL_SECONDS", "").strip()
        ttl_seconds = int(ttl_raw) if ttl_raw else None
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("CART_TTL_SECONDS must be a positive integer")

        return cls(
            backend=backend,
            storage_key=os.environ.get("CART_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            storage_dir=Path(os.environ.get("CART_STORAGE_DIR", DEFAULT_STORAGE_DIR)),
            ttl_seconds=ttl_seconds,
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
        )
