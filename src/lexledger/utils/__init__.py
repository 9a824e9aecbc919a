"""Utility functions for lexledger."""

from lexledger.utils.date_parser import parse_date, get_date_range
from lexledger.utils.amount_parser import parse_amount, to_decimal
from lexledger.utils.account_resolver import resolve_account

__all__ = ["parse_date", "get_date_range", "parse_amount", "to_decimal", "resolve_account"]
