"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from gomarketplace.services.money import to_decimal, round_money, multiply


class Product(BaseModel):
    """Product descriptor passed to add_to_cart (a cart item without quantity)."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(min_length=1)
    title: str
    image_url: str = Field(validation_alias=AliasChoices("image_url", "imageUrl"))
    price: Decimal


@dataclass(frozen=True)
class CartItem:
    """Single line in the cart."""
    id: str
    title: str
    image_url: str
    price: Decimal
    quantity: int = 1

    def __post_init__(self):
        # Normalize numeric fields
        object.__setattr__(self, "price", to_decimal(self.price))

    @property
    def total_price(self) -> Decimal:
        """Total price for all units."""
        return round_money(multiply(self.price, self.quantity))

    def with_quantity(self, quantity: int) -> "CartItem":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "title": self.title,
            "image_url": self.image_url,
            "price": str(self.price),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """
        Create from a stored dictionary.

        Raises:
            KeyError: If a required field is missing
            TypeError, ValueError: If a field has the wrong type
        """
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"quantity must be an integer, got {quantity!r}")
        if not isinstance(data["id"], str) or not data["id"]:
            raise TypeError("id must be a non-empty string")
        return cls(
            id=data["id"],
            title=str(data["title"]),
            image_url=str(data["image_url"]),
            price=to_decimal(data["price"], strict=True),
            quantity=quantity,
        )

    @classmethod
    def from_product(cls, product: Product) -> "CartItem":
        return cls(
            id=product.id,
            title=product.title,
            image_url=product.image_url,
            price=product.price,
            quantity=1,
        )


@dataclass(frozen=True)
class Cart:
    """
    Ordered, immutable cart state.

    Items are unique by id and every item has quantity >= 1. Every transition
    returns a new Cart; the receiver is never modified.
    """
    items: Tuple[CartItem, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        """Sum of line totals."""
        return round_money(sum((item.total_price for item in self.items), Decimal("0")))

    def find(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def with_added(self, product: Product) -> "Cart":
        """Add one unit of product, appending it when not yet in the cart."""
        if self.find(product.id) is None:
            return Cart(self.items + (CartItem.from_product(product),))
        return self.with_incremented(product.id)

    def with_incremented(self, item_id: str) -> "Cart":
        """One more unit of item_id; unknown ids leave the items unchanged."""
        return Cart(tuple(
            item.with_quantity(item.quantity + 1) if item.id == item_id else item
            for item in self.items
        ))

    def with_decremented(self, item_id: str) -> "Cart":
        """One less unit of item_id, dropping every line that reaches zero."""
        items = (
            item.with_quantity(item.quantity - 1) if item.id == item_id else item
            for item in self.items
        )
        return Cart(tuple(item for item in items if item.quantity > 0))
