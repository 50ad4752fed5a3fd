"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

Number = Union[str, int, float, Decimal, None]


def to_decimal(value: Number) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Go through str so 0.1 stays 0.1
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """Round monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Number, factor: Number) -> Decimal:
    """Multiply two values as Decimals."""
    return to_decimal(value) * to_decimal(factor)


def format_money(value: Number, currency_symbol: str = "$") -> str:
    """Format amount for display, e.g. ``$179.90``."""
    return f"{currency_symbol}{round_money(value):,.2f}"


def parse_decimal(value: Number) -> Decimal:
    """
    Strict Decimal conversion for untrusted input (API payloads, snapshots).

    Raises:
        ValueError: If the value is missing, unparsable, or not finite
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Invalid amount {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"Invalid amount {value!r}")
    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result
