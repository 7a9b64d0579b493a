#!/usr/bin/env python3
"""Print the persisted cart for the configured storage backend."""
import argparse
import asyncio
import sys

from gomarketplace.cart import CartProvider
from gomarketplace.config import Settings
from gomarketplace.services.money import format_money


async def show_cart(currency: str) -> int:
    settings = Settings.from_env()
    print(f"Backend: {settings.backend.value} | key: {settings.storage_key}")

    async with CartProvider.from_settings(settings) as cart:
        if not cart.products:
            print("Cart is empty")
            return 0

        for item in cart.products:
            print(
                f"  {item.id:12s} {item.title[:30]:30s} "
                f"x{item.quantity:<3d} {format_money(item.total_price, currency):>12s}"
            )
        print(f"Items: {cart.cart.total_items} | Subtotal: {format_money(cart.cart.subtotal, currency)}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--currency", default="BRL", help="Currency code used for display")
    args = parser.parse_args()
    return asyncio.run(show_cart(args.currency))


if __name__ == "__main__":
    sys.exit(main())
