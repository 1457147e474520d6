"""
Field extraction for scanned receipts.

This module provides the FieldExtractor class, which turns noisy OCR text into
a transaction title and amount using an ordered table of regex patterns with a
magnitude fallback.
"""

import re
from decimal import Decimal
from typing import List, Optional, Tuple

from expense_scan.models import DEFAULT_TITLE, ExtractedFields, RecognizedText
from expense_scan.utils.normalization import parse_amount_token, truncate_for_display
from expense_scan.utils.logging_config import logger


class FieldExtractor:
    """
    Deterministic extractor for the amount and merchant title of a receipt.
    
    Amount policy:
    - Patterns are tried in order, most specific first. The first pattern
      that matches anywhere wins, using its first occurrence in reading order.
    - With no labeled or currency match, the largest number printed anywhere
      is taken as the grand total.
    - No number at all leaves the amount empty. That is a normal outcome.
    """
    
    # --- Class Constants for Regex Patterns ---

    # Latin markers only as whole words, so 'Covers 2' is not 'Rs 2'
    CURRENCY_MARKER = r'(?:रु|(?<![A-Za-z])(?:Rs\.?|NPR)(?![A-Za-z]))'
    NUMBER = r'[0-9]+(?:[,.][0-9]+)*'

    AMOUNT_PATTERNS: List[Tuple[str, str]] = [
        ('currency_prefixed', CURRENCY_MARKER + r'\s*(' + NUMBER + r')'),
        ('currency_suffixed', r'(' + NUMBER + r')\s*' + CURRENCY_MARKER),
        ('labeled_total', r'total[:\s]*' + CURRENCY_MARKER + r'?\s*(' + NUMBER + r')'),
        ('labeled_amount', r'amount[:\s]*' + CURRENCY_MARKER + r'?\s*(' + NUMBER + r')'),
    ]

    TITLE_SCAN_LINES = 3
    TITLE_MIN_EXCLUSIVE = 2
    TITLE_MAX_EXCLUSIVE = 50
    TITLE_DISPLAY_LIMIT = 30
    TITLE_STOPWORDS = re.compile(r'receipt|bill|invoice', re.IGNORECASE)

    def __init__(self):
        """Initializes the extractor with pre-compiled patterns."""
        self.amount_re_patterns = [
            (name, re.compile(pattern, re.IGNORECASE)) for name, pattern in self.AMOUNT_PATTERNS
        ]
        self.number_re = re.compile(self.NUMBER)

    def extract_fields(self, text) -> ExtractedFields:
        """
        Extracts title and amount from recognized text.

        Accepts either a RecognizedText or a plain string. Never raises for
        string input; missing values fall back to their defaults.
        """
        if isinstance(text, RecognizedText):
            text = text.text
        text = text or ""

        amount = self.extract_amount(text)
        title = self.extract_title(text)
        logger.debug(f"Extracted fields: title='{title}', amount={amount}")
        return ExtractedFields(title=title, amount=amount)

    def extract_amount(self, text: str) -> Optional[Decimal]:
        """Runs the ordered pattern table, then the magnitude fallback."""
        for name, pattern in self.amount_re_patterns:
            match = pattern.search(text)
            if not match:
                continue
            amount = parse_amount_token(match.group(1))
            if amount is not None:
                logger.debug(f"Amount {amount} matched by pattern '{name}'")
                return amount

        return self._largest_number(text)

    def _largest_number(self, text: str) -> Optional[Decimal]:
        """
        Fallback for unlabeled receipts: the grand total is usually the
        largest printed figure.
        """
        values = [parse_amount_token(token) for token in self.number_re.findall(text)]
        values = [v for v in values if v is not None]
        if not values:
            return None

        largest = max(values)
        if largest <= 0:
            return None

        logger.debug(f"Amount {largest} chosen as largest of {len(values)} numbers")
        return largest

    def extract_title(self, text: str) -> str:
        """Picks the merchant title from the first few non-blank lines."""
        lines = [line.strip() for line in text.split('\n') if line.strip()]

        for line in lines[:self.TITLE_SCAN_LINES]:
            if self._is_title_line(line):
                return truncate_for_display(line, self.TITLE_DISPLAY_LIMIT)

        return DEFAULT_TITLE

    def _is_title_line(self, line: str) -> bool:
        if not (self.TITLE_MIN_EXCLUSIVE < len(line) < self.TITLE_MAX_EXCLUSIVE):
            return False
        if line[0] in '0123456789':
            return False
        return self.TITLE_STOPWORDS.search(line) is None
