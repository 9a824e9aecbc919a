"""Settings and exchange-rate domain service."""

from typing import Optional
from decimal import Decimal

import structlog

from lexledger.database.base import Database
from lexledger.domain import errors
from lexledger.domain.currency import normalize_currency, quantize
from lexledger.domain.entities import Setting as SettingEntity
from lexledger.domain.errors import InvalidRateError, NotFoundError, ValidationError
from lexledger.utils.amount_parser import to_decimal

logger = structlog.get_logger(__name__)

EXCHANGE_RATE_PREFIX = "EX_RATE_"
# EGP per USD, used to report EGP payroll and billing in USD
EXCHANGE_RATE_KEY = "EX_RATE_EGP_USD"


def exchange_rate_key(price_currency: str, unit_currency: str) -> str:
    """Settings key for the price of one unit_currency in price_currency.

    EX_RATE_EGP_USD = 50.75 reads "one USD costs 50.75 EGP".
    """
    return f"{EXCHANGE_RATE_PREFIX}{normalize_currency(price_currency)}_{normalize_currency(unit_currency)}"


def parse_rate(rate: object) -> Decimal:
    """Return rate as a positive finite Decimal or raise InvalidRateError."""
    try:
        value = to_decimal(rate)
    except ValueError:
        raise InvalidRateError(errors.invalid_rate(rate))
    if value <= 0:
        raise InvalidRateError(errors.invalid_rate(rate))
    return value


class SettingsService:
    """Service for keyed settings such as exchange rates."""

    def __init__(self, db: Database):
        """Initialize settings service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_setting(self, key: str) -> Optional[SettingEntity]:
        """Get setting by key."""
        return self.db.get_setting(key)

    def set_setting(self, key: str, value: str) -> None:
        """Create or update a setting."""
        key = (key or "").strip()
        if not key:
            raise ValidationError("Setting key is required")
        self.db.upsert_setting(key, value)
        logger.info("setting_updated", key=key)

    def set_exchange_rate(self, pair_key: str, rate: object) -> Decimal:
        """Store an exchange rate under pair_key.

        Args:
            pair_key: Settings key, e.g. EX_RATE_EGP_USD
            rate: Positive number (Decimal, int, float or numeric string)

        Returns:
            The stored rate

        Raises:
            InvalidRateError: If rate is not numeric, not finite, or not positive
        """
        pair_key = (pair_key or "").strip()
        if not pair_key:
            raise ValidationError("Exchange rate key is required")
        value = parse_rate(rate)
        self.db.upsert_setting(pair_key, str(value))
        logger.info("exchange_rate_set", key=pair_key, rate=str(value))
        return value

    def get_exchange_rate(self, pair_key: str) -> Optional[Decimal]:
        """Stored rate for pair_key, or None when unset."""
        setting = self.db.get_setting(pair_key)
        if setting is None:
            return None
        return Decimal(setting.value)

    def convert(self, amount: object, from_currency: str, to_currency: str) -> Decimal:
        """Convert an amount between currencies using stored rates.

        EX_RATE_{FROM}_{TO} prices one TO in FROM, so the amount is divided by
        it; failing that, EX_RATE_{TO}_{FROM} prices one FROM in TO and the
        amount is multiplied by it. The result is rounded to the target
        currency's minor unit.

        Raises:
            NotFoundError: If neither direction has a stored rate
        """
        from_currency = normalize_currency(from_currency)
        to_currency = normalize_currency(to_currency)
        try:
            value = to_decimal(amount)
        except ValueError as e:
            raise ValidationError(f"Invalid amount: {e}")

        if from_currency == to_currency:
            return quantize(value, to_currency)

        price_of_target = self.get_exchange_rate(exchange_rate_key(from_currency, to_currency))
        if price_of_target is not None:
            return quantize(value / price_of_target, to_currency)

        price_of_source = self.get_exchange_rate(exchange_rate_key(to_currency, from_currency))
        if price_of_source is None:
            raise NotFoundError(errors.exchange_rate_not_found(from_currency, to_currency))
        return quantize(value * price_of_source, to_currency)
