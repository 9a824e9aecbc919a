"""Currency codes and minor-unit precision."""

from decimal import Decimal, ROUND_HALF_UP

from lexledger.domain.errors import ValidationError

DEFAULT_CURRENCY = "USD"

# ISO 4217 minor units for currencies the firm bills in; anything else uses 2
MINOR_UNITS = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "EGP": 2,
    "SAR": 2,
    "AED": 2,
    "JPY": 0,
    "KWD": 3,
    "BHD": 3,
    "OMR": 3,
}


def normalize_currency(code: str | None) -> str:
    """Return an upper-case three-letter currency code."""
    if code is None:
        return DEFAULT_CURRENCY
    normalized = code.strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValidationError(f"Invalid currency code '{code}'")
    return normalized


def minor_unit(currency: str) -> Decimal:
    """Smallest representable amount in a currency, e.g. 0.01 for USD."""
    return Decimal(1).scaleb(-MINOR_UNITS.get(currency, 2))


def quantize(amount: Decimal, currency: str) -> Decimal:
    """Round an amount to the currency's minor unit."""
    return amount.quantize(minor_unit(currency), rounding=ROUND_HALF_UP)


def is_zero(amount: Decimal, currency: str) -> bool:
    """True when an amount rounds to zero in the currency's minor unit."""
    return quantize(amount, currency) == 0
