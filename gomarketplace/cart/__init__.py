"""Cart package: models, storage, store and provider."""
from .models import Cart, CartItem, Product
from .service import CartStore
from .provider import CartProvider
from .storage import FileStorage, KeyValueStorage, MemoryStorage, RedisStorage

__all__ = [
    "Cart",
    "CartItem",
    "CartProvider",
    "CartStore",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "Product",
    "RedisStorage",
]
