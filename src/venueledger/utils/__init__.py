"""Utility functions for venueledger."""

from venueledger.utils.date_parser import parse_date
from venueledger.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
