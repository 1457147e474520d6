"""
Text recognition client and its failure types.
"""

from .errors import NoTextDetected, RecognitionError, RecognitionServiceError, RecognitionTransportError
from .ocr_space_client import OcrSpaceClient

__all__ = [
    "NoTextDetected", "OcrSpaceClient", "RecognitionError",
    "RecognitionServiceError", "RecognitionTransportError",
]
