"""
Keyword categorization for scanned receipts.
"""

from typing import List, Optional, Sequence, Tuple

from expense_scan.models import ExpenseCategory, RecognizedText
from expense_scan.utils.logging_config import logger

CategoryRule = Tuple[ExpenseCategory, Sequence[str]]


class Categorizer:
    """
    Assigns exactly one spending category to a receipt.

    Rules are checked in order and the first one with any keyword present in
    the text wins. Order matters: a hotel restaurant bill paid by phone must
    land in Food, not Bills.
    """

    CATEGORY_RULES: List[CategoryRule] = [
        (ExpenseCategory.FOOD, (
            'restaurant', 'cafe', 'hotel', 'food', 'pizza', 'burger', 'kitchen', 'dining'
        )),
        (ExpenseCategory.TRANSPORT, (
            'taxi', 'uber', 'bus', 'transport', 'fuel', 'petrol', 'gas'
        )),
        (ExpenseCategory.HEALTH, (
            'pharmacy', 'hospital', 'clinic', 'medical', 'doctor', 'health'
        )),
        (ExpenseCategory.SHOPPING, (
            'mall', 'store', 'shop', 'market', 'clothing', 'electronics'
        )),
        (ExpenseCategory.ENTERTAINMENT, (
            'movie', 'cinema', 'entertainment', 'game', 'fun'
        )),
        (ExpenseCategory.BILLS, (
            'electric', 'water', 'internet', 'phone', 'bill', 'utility'
        )),
    ]

    def __init__(self, rules: Optional[Sequence[CategoryRule]] = None):
        self.rules = list(rules) if rules is not None else list(self.CATEGORY_RULES)

    def categorize(self, text) -> ExpenseCategory:
        """Returns the category of the first matching rule, or OTHERS."""
        rule = self.matching_rule(text)
        if rule is None:
            return ExpenseCategory.OTHERS
        return rule[0]

    def matching_rule(self, text) -> Optional[Tuple[ExpenseCategory, str]]:
        """
        Explains a categorization: the winning category and the keyword
        that triggered it, or None when nothing matched.
        """
        if isinstance(text, RecognizedText):
            text = text.text
        text_lower = (text or "").lower()

        for category, keywords in self.rules:
            for keyword in keywords:
                if keyword in text_lower:
                    logger.debug(f"Category {category.value} via keyword '{keyword}'")
                    return category, keyword
        return None
