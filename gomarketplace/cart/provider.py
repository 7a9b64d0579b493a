"""Cart provider: scopes an initialized CartStore for its consumers."""
from typing import Optional

from gomarketplace.config import DEFAULT_STORAGE_KEY, Settings
from gomarketplace.db import create_storage
from gomarketplace.errors import CartUsageError, ERROR_OUTSIDE_PROVIDER, ERROR_PROVIDER_OPEN
from gomarketplace.logging import get_logger

from .service import CartStore
from .storage import KeyValueStorage

logger = get_logger(__name__)


class CartProvider:
    """
    Creates the cart store, loads it and closes it again.

    The store is handed to consumers explicitly; there is no global cart.

    Usage:
        async with CartProvider(FileStorage("data/storage")) as cart:
            cart.add_to_cart(product)

    Accessing `provider.cart` outside the `async with` block raises
    CartUsageError.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._store: Optional[CartStore] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CartProvider":
        """Build a provider for the storage backend configured in the environment."""
        settings = settings or Settings.from_env()
        return cls(create_storage(settings), settings.storage_key)

    @property
    def cart(self) -> CartStore:
        if self._store is None:
            raise CartUsageError(ERROR_OUTSIDE_PROVIDER)
        return self._store

    async def __aenter__(self) -> CartStore:
        if self._store is not None:
            raise CartUsageError(ERROR_PROVIDER_OPEN)
        store = CartStore(self._storage, self._key)
        await store.load()
        self._store = store
        logger.debug("Cart provider opened")
        return store

    async def __aexit__(self, exc_type, exc, tb) -> None:
        store, self._store = self._store, None
        if store is not None:
            await store.close()
        logger.debug("Cart provider closed")
