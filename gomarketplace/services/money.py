"""
Money Utilities - Safe Decimal operations for cart prices.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "BRL": "R$",
}

Number = Union[str, int, float, Decimal]


def to_decimal(value: Union[Number, None], strict: bool = False) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)
        strict: Raise ValueError instead of falling back to zero

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None or isinstance(value, bool):
        if strict:
            raise ValueError(f"Not a monetary value: {value!r}")
        return Decimal("0")

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # Convert via string to avoid float precision issues
            if isinstance(value, float):
                result = Decimal(str(value))
            else:
                result = Decimal(value)
        except (InvalidOperation, ValueError, TypeError):
            if strict:
                raise ValueError(f"Not a monetary value: {value!r}")
            return Decimal("0")

    if not result.is_finite():
        if strict:
            raise ValueError(f"Not a monetary value: {value!r}")
        return Decimal("0")
    return result


def round_money(value: Number) -> Decimal:
    """Round monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def format_money(value: Number, currency: str = "USD") -> str:
    """
    Format monetary value with currency symbol.

    Args:
        value: Value to format
        currency: Currency code (USD, EUR, BRL, etc.)

    Returns:
        Formatted string with currency symbol
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    formatted = f"{round_money(value):,.2f}"

    # Symbol placement
    if currency in ("USD", "EUR", "GBP"):
        return f"{symbol}{formatted}"
    if currency == "BRL":
        return f"{symbol} {formatted}"
    return f"{formatted} {symbol}"

