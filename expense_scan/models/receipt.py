"""
Data models for the receipt-to-transaction extraction pipeline.

Every value here is created fresh per scan and never mutated, so all models
are frozen pydantic models.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expense_scan.utils.normalization import format_amount

DEFAULT_TITLE = "Receipt"


class ExpenseCategory(str, Enum):
    """Closed set of spending categories offered by the expense tracker."""
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    OTHERS = "Others"


class ImageSource(str, Enum):
    """Where the receipt photo came from."""
    CAMERA = "camera"
    GALLERY = "gallery"


class ReceiptImage(BaseModel):
    """
    A captured receipt photo, copied out of the capture layer.
    The pipeline only ever holds these bytes, never a handle to the UI.
    """
    model_config = ConfigDict(frozen=True)

    data: bytes
    content_type: str = "image/jpeg"
    filename: str = "receipt.jpg"
    source: ImageSource = ImageSource.CAMERA

    @field_validator('data')
    @classmethod
    def validate_data(cls, v):
        """Rejects empty captures."""
        if not v:
            raise ValueError('Receipt image must not be empty')
        return v


class RecognizedText(BaseModel):
    """All text recognized from one image. May be empty or multi-line."""
    model_config = ConfigDict(frozen=True)

    text: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


class ExtractedFields(BaseModel):
    """Title and amount guessed from recognized text."""
    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    amount: Optional[Decimal] = None


class ExtractionCandidate(BaseModel):
    """
    Best-effort structured guess for a transaction before user confirmation.
    Title and category always carry a value; amount may be missing.
    """
    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    amount: Optional[Decimal] = None
    category: ExpenseCategory = ExpenseCategory.OTHERS

    @property
    def amount_text(self) -> str:
        return format_amount(self.amount)

    @property
    def has_amount(self) -> bool:
        return self.amount is not None


class TransactionDraft(BaseModel):
    """
    What the transaction-creation form receives.
    An empty `amount` means the user has to type it in.
    """
    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    amount: str = ""
    category: str = ExpenseCategory.OTHERS.value

    @property
    def needs_amount(self) -> bool:
        return self.amount == ""

    @classmethod
    def from_candidate(cls, candidate: ExtractionCandidate, include_amount: bool = True) -> "TransactionDraft":
        return cls(
            title=candidate.title,
            amount=candidate.amount_text if include_amount else "",
            category=candidate.category.value,
        )


class Resolved(BaseModel):
    """Extraction found an amount; the candidate can prefill the form as-is."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["resolved"] = "resolved"
    candidate: ExtractionCandidate

    @field_validator('candidate')
    @classmethod
    def validate_has_amount(cls, v):
        if v.amount is None:
            raise ValueError('Resolved outcome requires an amount')
        return v

    def to_draft(self) -> TransactionDraft:
        return TransactionDraft.from_candidate(self.candidate)


class NeedsManualAmount(BaseModel):
    """
    Text was recognized but no amount could be found.
    The caller either retries the capture or accepts the title and category
    and lets the user type the amount.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["needs_manual_amount"] = "needs_manual_amount"
    candidate: ExtractionCandidate

    @field_validator('candidate')
    @classmethod
    def validate_has_no_amount(cls, v):
        if v.amount is not None:
            raise ValueError('NeedsManualAmount outcome must not carry an amount')
        return v

    def accept_manual(self) -> TransactionDraft:
        return TransactionDraft.from_candidate(self.candidate, include_amount=False)


class Failed(BaseModel):
    """Recognition failed; only a blank manual entry can be offered."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["failed"] = "failed"
    reason: str
    error_type: str = "RecognitionError"

    def manual_fallback(self) -> TransactionDraft:
        return TransactionDraft()


ExtractionOutcome = Annotated[
    Union[Resolved, NeedsManualAmount, Failed],
    Field(discriminator="kind"),
]
