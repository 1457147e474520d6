"""
Data models for receipt scanning.
"""

from .receipt import (
    DEFAULT_TITLE,
    ExpenseCategory,
    ExtractedFields,
    ExtractionCandidate,
    ExtractionOutcome,
    Failed,
    ImageSource,
    NeedsManualAmount,
    ReceiptImage,
    RecognizedText,
    Resolved,
    TransactionDraft,
)

__all__ = [
    "DEFAULT_TITLE", "ExpenseCategory", "ExtractedFields", "ExtractionCandidate",
    "ExtractionOutcome", "Failed", "ImageSource", "NeedsManualAmount", "ReceiptImage",
    "RecognizedText", "Resolved", "TransactionDraft",
]
