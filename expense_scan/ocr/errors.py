"""
Recognition failures raised by the text recognition client.

The subclasses exist so logs can tell the failure modes apart; the scan
pipeline only ever catches RecognitionError.
"""


class RecognitionError(Exception):
    """Base class for every way text recognition can fail."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class RecognitionTransportError(RecognitionError):
    """Network failure or non-success HTTP status from the OCR service."""

    def __init__(self, reason: str, status_code=None):
        super().__init__(reason)
        self.status_code = status_code


class RecognitionServiceError(RecognitionError):
    """The OCR service answered but reported an error or sent garbage."""

    def __init__(self, reason: str, messages=None):
        super().__init__(reason)
        self.messages = list(messages or [])


class NoTextDetected(RecognitionError):
    """The service found no text in the image."""

    def __init__(self, reason: str = "No text detected in image"):
        super().__init__(reason)
