"""
Decimal helpers for prices and cart totals.

Prices arrive as floats from Supabase, as strings from the trolley feed
and the cart snapshot, and as Decimals inside the engine. Everything is
converted with ``to_decimal`` first; floats only appear again in JSON
responses (``to_float``).
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0")

Amount = Union[str, int, float, Decimal, None]


def to_decimal(value: Amount) -> Decimal:
    """Parse a price or total. None and unparseable values become 0."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() first, otherwise 1.1 becomes 1.100000000000000088817841970012523
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO


def multiply(price: Amount, quantity: Amount) -> Decimal:
    return to_decimal(price) * to_decimal(quantity)


def format_amount(value: Amount) -> str:
    """Two decimals, half-up: "6.00". Used in UPI links and log lines."""
    return f"{to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP):.2f}"


def to_float(value: Amount) -> float:
    """JSON responses only; never compute with the result."""
    return float(to_decimal(value))


def format_feed_total(value: Amount) -> str:
    """
    Trolley `totalPrice` value: cents precision without trailing zeros.

    Matches how the trolley devices print numbers ("6", "5.5", "0.75").
    """
    cents = to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    if cents == cents.to_integral_value():
        return str(int(cents))
    return f"{cents.normalize():f}"
