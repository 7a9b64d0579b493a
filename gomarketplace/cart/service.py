"""Cart store: in-memory cart state with write-through persistence."""
import asyncio
from typing import Any, Callable, List, Mapping, Optional, Set, Union

from gomarketplace.config import DEFAULT_STORAGE_KEY
from gomarketplace.errors import CartDecodeError, CartUsageError, ERROR_STORE_CLOSED
from gomarketplace.logging import get_logger, sanitize_id_for_logging

from .codec import decode_items, encode_items
from .models import Cart, CartItem, Product
from .storage import KeyValueStorage

logger = get_logger(__name__)

Listener = Callable[[List[CartItem]], Any]


class CartStore:
    """
    Owns the cart state and keeps storage in step with it.

    State changes are synchronous: the new cart is visible to readers as soon
    as a mutation returns. Each mutation then schedules a write of the full
    cart on the running event loop. Writes run one at a time in the order the
    mutations were issued, so storage always ends up holding the latest cart.
    A failed write is logged and never affects the in-memory state.

    Usage:
        store = CartStore(MemoryStorage())
        await store.load()
        store.add_to_cart({"id": "A", "title": "Shoe", "image_url": "u", "price": 100})
        await store.flush()
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._cart = Cart()
        self._revision = 0
        self._loaded = False
        self._closed = False
        self._load_task: Optional[asyncio.Task] = None
        self._write_lock = asyncio.Lock()
        self._pending_writes: Set[asyncio.Task] = set()
        self._listeners: List[Listener] = []

    # ==================== READS ====================

    @property
    def products(self) -> List[CartItem]:
        """Current cart lines, in the order they were added."""
        self._ensure_open()
        return list(self._cart.items)

    @property
    def cart(self) -> Cart:
        """Current cart with its totals."""
        self._ensure_open()
        return self._cart

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def closed(self) -> bool:
        return self._closed

    # ==================== LOADING ====================

    def start(self) -> asyncio.Task:
        """Begin loading the persisted cart in the background."""
        self._ensure_open()
        if self._load_task is None:
            self._load_task = asyncio.get_running_loop().create_task(self._load())
        return self._load_task

    async def load(self) -> List[CartItem]:
        """
        Load the persisted cart once per store lifetime.

        Later calls wait for the same load and never read storage again.
        """
        await asyncio.shield(self.start())
        return self.products

    async def _load(self) -> None:
        items = ()

        # Reads queue behind writes already in flight
        async with self._write_lock:
            try:
                blob = await self._storage.get(self._key)
            except Exception as e:
                logger.warning(f"Failed to read cart from storage: {e}", exc_info=True)
                blob = None

        if blob:
            try:
                items = decode_items(blob)
            except CartDecodeError as e:
                logger.warning(f"Ignoring stored cart: {e}")

        self._loaded = True

        # Any mutation since construction is newer than storage
        if self._revision:
            logger.info("Cart changed before load finished; keeping in-memory cart")
            return

        if items:
            self._cart = Cart(items)
            logger.info(f"Restored cart with {len(items)} item(s)")
            self._notify()

    # ==================== MUTATIONS ====================

    def add_to_cart(self, product: Union[Product, Mapping[str, Any]]) -> List[CartItem]:
        """
        Add one unit of a product.

        A product already in the cart gets its quantity raised by one; a new
        product is appended with quantity 1. Any quantity on the input is ignored.

        Raises:
            pydantic.ValidationError: If product is missing id, title, image_url or price
        """
        self._ensure_open()
        if not isinstance(product, Product):
            product = Product.model_validate(product)
        return self._commit(self._cart.with_added(product))

    def increment(self, item_id: str) -> List[CartItem]:
        """Raise the quantity of item_id by one. Unknown ids are a no-op."""
        self._ensure_open()
        if self._cart.find(item_id) is None:
            logger.debug(f"increment: item {sanitize_id_for_logging(item_id)} not in cart")
        return self._commit(self._cart.with_incremented(item_id))

    def decrement(self, item_id: str) -> List[CartItem]:
        """Lower the quantity of item_id by one, removing it at zero. Unknown ids are a no-op."""
        self._ensure_open()
        if self._cart.find(item_id) is None:
            logger.debug(f"decrement: item {sanitize_id_for_logging(item_id)} not in cart")
        return self._commit(self._cart.with_decremented(item_id))

    def _commit(self, cart: Cart) -> List[CartItem]:
        # Fails without a running loop, before any state changes
        loop = asyncio.get_running_loop()
        self._cart = cart
        self._revision += 1
        self._schedule_write(loop, cart)
        self._notify()
        return list(cart.items)

    # ==================== PERSISTENCE ====================

    def _schedule_write(self, loop: asyncio.AbstractEventLoop, cart: Cart) -> None:
        task = loop.create_task(self._write(cart))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write(self, cart: Cart) -> None:
        async with self._write_lock:
            try:
                if cart.is_empty:
                    await self._storage.remove(self._key)
                else:
                    await self._storage.set(self._key, encode_items(cart.items))
            except Exception as e:
                logger.warning(f"Failed to persist cart: {e}", exc_info=True)

    async def flush(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._pending_writes:
            await asyncio.gather(*self._pending_writes)

    async def close(self) -> None:
        """Finish loading and pending writes, then refuse further use."""
        if self._closed:
            return
        if self._load_task is not None:
            await self._load_task
        await self.flush()
        self._closed = True
        self._listeners.clear()

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener with the new cart lines after every change.

        Returns:
            A function that removes the listener
        """
        self._ensure_open()
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(list(self._cart.items))
            except Exception:
                logger.exception("Cart listener failed")

    def _ensure_open(self) -> None:
        if self._closed:
            raise CartUsageError(ERROR_STORE_CLOSED)
