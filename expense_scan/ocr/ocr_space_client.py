"""
Text recognition via the OCR.space HTTP API.

One multipart POST per image, no retries. Retry and fallback policy belong to
the scan session.
"""

import os
from typing import Any, Dict, List, Optional, Union

import httpx
from dotenv import load_dotenv

from expense_scan.models import ReceiptImage, RecognizedText
from expense_scan.ocr.errors import (
    NoTextDetected,
    RecognitionServiceError,
    RecognitionTransportError,
)
from expense_scan.utils.logging_config import logger


class OcrSpaceClient:
    """
    Async client for the OCR.space parse endpoint.

    Configuration comes from explicit arguments first, then the environment
    (a .env file is loaded if present):
    OCR_SPACE_API_KEY, OCR_SPACE_URL, OCR_SPACE_LANGUAGE, OCR_SPACE_ENGINE,
    OCR_SPACE_TIMEOUT.
    """

    DEFAULT_URL = 'https://api.ocr.space/parse/image'
    DEFAULT_LANGUAGE = 'eng'
    DEFAULT_ENGINE = '2'
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        language: Optional[str] = None,
        engine: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        load_dotenv()

        self.api_key = api_key or os.getenv('OCR_SPACE_API_KEY')
        if not self.api_key:
            raise ValueError("OCR_SPACE_API_KEY is required")

        self.url = url or os.getenv('OCR_SPACE_URL', self.DEFAULT_URL)
        self.language = language or os.getenv('OCR_SPACE_LANGUAGE', self.DEFAULT_LANGUAGE)
        self.engine = str(engine if engine is not None else os.getenv('OCR_SPACE_ENGINE', self.DEFAULT_ENGINE))
        self.timeout = float(timeout if timeout is not None else os.getenv('OCR_SPACE_TIMEOUT', self.DEFAULT_TIMEOUT))
        self.http_client = http_client

        logger.info(f"OcrSpaceClient initialized for {self.url} (engine {self.engine}, language {self.language})")

    def build_form(self) -> Dict[str, str]:
        """Form fields sent alongside the image."""
        return {
            'apikey': self.api_key,
            'language': self.language,
            'isOverlayRequired': 'false',
            'detectOrientation': 'false',
            'isTable': 'false',
            'scale': 'true',
            'OCREngine': self.engine,
        }

    async def recognize(self, image: Union[ReceiptImage, bytes]) -> RecognizedText:
        """
        Sends one image to OCR.space and returns the recognized text.

        Raises:
            RecognitionTransportError: network failure or HTTP error status.
            RecognitionServiceError: the service reported an error.
            NoTextDetected: the service returned no usable text.
        """
        if not isinstance(image, ReceiptImage):
            image = ReceiptImage(data=bytes(image))

        logger.info(f"Sending {len(image.data)} bytes to OCR.space")
        try:
            response = await self._post(image)
        except httpx.HTTPError as e:
            logger.warning(f"OCR.space transport failure: {e!r}")
            raise RecognitionTransportError(f"OCR.space request failed: {e}") from e

        logger.debug(f"OCR.space response status: {response.status_code}")
        if response.is_error:
            raise RecognitionTransportError(
                f"OCR.space API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RecognitionServiceError("OCR.space returned a non-JSON response") from e

        return self.parse_payload(payload)

    async def _post(self, image: ReceiptImage) -> httpx.Response:
        files = {'file': (image.filename, image.data, image.content_type)}
        if self.http_client is not None:
            return await self.http_client.post(self.url, data=self.build_form(), files=files)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.url, data=self.build_form(), files=files)

    @staticmethod
    def parse_payload(payload: Any) -> RecognizedText:
        """Pulls the first parsed text out of an OCR.space JSON body."""
        if not isinstance(payload, dict):
            raise RecognitionServiceError("OCR.space returned an unexpected response body")

        results = payload.get('ParsedResults') or []
        if not isinstance(results, list):
            raise RecognitionServiceError("OCR.space returned malformed ParsedResults")
        if results:
            first = results[0]
            if not isinstance(first, dict):
                raise RecognitionServiceError("OCR.space returned an unexpected result entry")
            parsed_text = first.get('ParsedText') or ""
            if not isinstance(parsed_text, str):
                raise RecognitionServiceError("OCR.space returned non-text ParsedText")
            if not parsed_text.strip():
                raise NoTextDetected()
            return RecognizedText(text=parsed_text)

        messages = _as_message_list(payload.get('ErrorMessage'))
        if messages:
            raise RecognitionServiceError(f"OCR.space error: {', '.join(messages)}", messages=messages)

        raise NoTextDetected()


def _as_message_list(value: Any) -> List[str]:
    """ErrorMessage comes back as either a list or a single string."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]
