"""
Orchestrator for the receipt scan flow.

A ReceiptScanSession drives one screen's worth of scanning:
idle -> capturing -> recognizing -> extracting -> outcome -> idle.
"""

from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from expense_scan.models import (
    ExtractionCandidate,
    ExtractionOutcome,
    Failed,
    NeedsManualAmount,
    ReceiptImage,
    RecognizedText,
    Resolved,
)
from expense_scan.ocr.errors import NoTextDetected, RecognitionError
from expense_scan.parsers import Categorizer, FieldExtractor
from expense_scan.utils.logging_config import logger

ImageInput = Union[ReceiptImage, bytes, None]
OutcomeCallback = Callable[[ExtractionOutcome], None]


class ScanState(str, Enum):
    """Non-terminal states of a scan session."""
    IDLE = "idle"
    CAPTURING = "capturing"
    RECOGNIZING = "recognizing"
    EXTRACTING = "extracting"


class ScanInProgressError(RuntimeError):
    """Raised when a second scan is requested while one is still running."""


class ReceiptScanSession:
    """
    Runs the receipt-to-transaction pipeline with a single-flight guard.

    Responsibilities:
    1. Guard: at most one capture/recognition in flight; extra requests are rejected.
    2. Recognition: one call to the recognizer per image, failures become Failed.
    3. Extraction: FieldExtractor and Categorizer build the candidate.
    4. Policy: an amount gives Resolved, no amount gives NeedsManualAmount.
    5. Reporting: each outcome goes to the caller exactly once, unless the
       caller abandoned the flow in the meantime.

    The recognizer is anything with an awaitable `recognize(image)` returning
    RecognizedText, normally an OcrSpaceClient.
    """

    def __init__(
        self,
        recognizer,
        extractor: Optional[FieldExtractor] = None,
        categorizer: Optional[Categorizer] = None,
        on_outcome: Optional[OutcomeCallback] = None,
    ):
        self.recognizer = recognizer
        self.extractor = extractor or FieldExtractor()
        self.categorizer = categorizer or Categorizer()
        self.on_outcome = on_outcome
        self.state = ScanState.IDLE
        self._abandoned = False

    @property
    def is_busy(self) -> bool:
        return self.state != ScanState.IDLE

    async def scan(self, image: ImageInput) -> Optional[ExtractionOutcome]:
        """
        Scans an image the caller already captured.

        `None` or empty bytes mean the user cancelled the capture: the session
        stays idle and nothing is reported.
        """
        self._begin()
        try:
            return await self._process(image)
        finally:
            self._finish()

    async def capture_and_scan(
        self, capture: Callable[[], Awaitable[ImageInput]]
    ) -> Optional[ExtractionOutcome]:
        """Awaits an image source (camera, gallery) and scans what it returns."""
        self._begin()
        try:
            image = await capture()
            return await self._process(image)
        finally:
            self._finish()

    def abandon(self) -> None:
        """
        The caller left the screen. A running recognition call is allowed to
        finish but its outcome is dropped; during capture no call is made at all.
        """
        if self.is_busy:
            logger.info(f"Scan abandoned while {self.state.value}; result will be discarded")
            self._abandoned = True

    def extract(self, text: Union[RecognizedText, str]) -> ExtractionOutcome:
        """Builds the outcome for already recognized text. No I/O."""
        if isinstance(text, RecognizedText):
            text = text.text

        fields = self.extractor.extract_fields(text)
        candidate = ExtractionCandidate(
            title=fields.title,
            amount=fields.amount,
            category=self.categorizer.categorize(text),
        )

        if candidate.has_amount:
            return Resolved(candidate=candidate)
        return NeedsManualAmount(candidate=candidate)

    def _begin(self) -> None:
        if self.is_busy:
            raise ScanInProgressError(f"A receipt scan is already {self.state.value}")
        self.state = ScanState.CAPTURING

    def _finish(self) -> None:
        self.state = ScanState.IDLE
        self._abandoned = False

    async def _process(self, image: ImageInput) -> Optional[ExtractionOutcome]:
        if not image:
            logger.info("Receipt capture cancelled")
            return None
        if not isinstance(image, ReceiptImage):
            image = ReceiptImage(data=bytes(image))
        if self._abandoned:
            logger.info("Scan abandoned before recognition; skipping OCR call")
            return None

        self.state = ScanState.RECOGNIZING
        try:
            text = await self.recognizer.recognize(image)
            if text.is_blank:
                raise NoTextDetected()
        except RecognitionError as e:
            logger.warning(f"Text recognition failed ({type(e).__name__}): {e.reason}")
            return self._report(Failed(reason=e.reason, error_type=type(e).__name__))

        self.state = ScanState.EXTRACTING
        return self._report(self.extract(text))

    def _report(self, outcome: ExtractionOutcome) -> Optional[ExtractionOutcome]:
        if self._abandoned:
            logger.info(f"Discarding {outcome.kind} outcome of abandoned scan")
            return None

        logger.info(f"Receipt scan finished: {outcome.kind}")
        if self.on_outcome is not None:
            self.on_outcome(outcome)
        return outcome
