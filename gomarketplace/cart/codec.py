"""JSON encoding of the cart item sequence for storage."""
import json
from typing import Iterable, Tuple

from gomarketplace.errors import CartDecodeError, ERROR_CORRUPTED_CART, ERROR_INVALID_CART_ITEM

from .models import CartItem


def encode_items(items: Iterable[CartItem]) -> str:
    """Serialize items, in cart order, to a JSON array."""
    return json.dumps([item.to_dict() for item in items], ensure_ascii=False)


def decode_items(blob: str) -> Tuple[CartItem, ...]:
    """
    Parse a stored JSON array back into cart items.

    The stored blob must satisfy the cart invariants: ids are unique and
    every quantity is at least 1.

    Raises:
        CartDecodeError: If the blob is not valid JSON or an item is malformed
    """
    try:
        data = json.loads(blob)
    except (json.JSONDecodeError, TypeError) as e:
        raise CartDecodeError(f"{ERROR_CORRUPTED_CART}: {e}") from e

    if not isinstance(data, list):
        raise CartDecodeError(f"{ERROR_CORRUPTED_CART}: expected a list, got {type(data).__name__}")

    items = []
    seen = set()
    for index, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise CartDecodeError(f"{ERROR_INVALID_CART_ITEM} at position {index}")
        try:
            item = CartItem.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise CartDecodeError(f"{ERROR_INVALID_CART_ITEM} at position {index}: {e}") from e
        if item.quantity < 1:
            raise CartDecodeError(f"{ERROR_INVALID_CART_ITEM} at position {index}: quantity {item.quantity}")
        if item.id in seen:
            raise CartDecodeError(f"{ERROR_INVALID_CART_ITEM} at position {index}: duplicate id")
        seen.add(item.id)
        items.append(item)

    return tuple(items)
