"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45", "E£123.45", "EGP 123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is not finite
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and ISO codes
    amount_str = re.sub(r"E£|[$€£¥]|\b[A-Z]{3}\b", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")
    return -amount if is_negative else amount


def to_decimal(value: object) -> Decimal:
    """Coerce a caller-supplied number into a finite Decimal.

    Strings go through parse_amount; floats are converted through their
    shortest repr so 50.75 stays 50.75.

    Raises:
        ValueError: If value is not numeric
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    elif isinstance(value, str):
        return parse_amount(value)
    else:
        raise ValueError(f"Not a number: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return amount
