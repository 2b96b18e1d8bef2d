"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "500000"
    - "500,000"
    - "500000.50"
    - "500 000 VND"
    - "₫500,000"

    Sign is kept as written; services reject non-positive amounts.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols and codes
    cleaned = re.sub(r"[$€£¥₫]|VND", "", amount_str.strip(), flags=re.IGNORECASE)

    # Remove thousands separators
    cleaned = re.sub(r"[,\s]", "", cleaned)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount
