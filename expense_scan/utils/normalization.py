"""
Normalization helpers for numbers and display strings pulled out of OCR text.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

_LEADING_DECIMAL = re.compile(r'[0-9]+(?:\.[0-9]+)?')


def parse_amount_token(token: str) -> Optional[Decimal]:
    """
    Converts a numeric OCR token into a Decimal.
    
    Transformation pipeline:
    1. Strip grouping commas ('1,250.00' -> '1250.00')
    2. Keep the leading valid decimal ('1.234.56' -> '1.234')
    
    Returns None when the token holds no digits at all.
    """
    if not token:
        return None

    cleaned = token.replace(',', '')
    match = _LEADING_DECIMAL.match(cleaned)
    if not match:
        return None

    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return None


def format_amount(amount: Optional[Decimal]) -> str:
    """Renders an amount as a plain decimal string, '' when absent."""
    if amount is None:
        return ""
    return format(amount, 'f')


def truncate_for_display(value: str, limit: int = 30, marker: str = "...") -> str:
    """Cuts a string to `limit` characters and appends `marker` if it was longer."""
    if len(value) > limit:
        return value[:limit] + marker
    return value
