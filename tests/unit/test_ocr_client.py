import asyncio
import pytest
import httpx
from unittest.mock import patch

from expense_scan.models import ReceiptImage
from expense_scan.ocr import (
    NoTextDetected,
    OcrSpaceClient,
    RecognitionError,
    RecognitionServiceError,
    RecognitionTransportError,
)

OCR_URL = "https://ocr.test/parse/image"
IMAGE = ReceiptImage(data=b"\xff\xd8fake-jpeg")


def make_client(handler, **kwargs):
    """OcrSpaceClient wired to an in-memory transport."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OcrSpaceClient(api_key="test-key", url=OCR_URL, http_client=http, **kwargs)


def json_handler(payload, status_code=200):
    def handler(request):
        return httpx.Response(status_code, json=payload)
    return handler


def test_request_shape():
    captured = {}

    def handler(request):
        captured["request"] = request
        return httpx.Response(200, json={"ParsedResults": [{"ParsedText": "Cafe\nTotal 10"}]})

    client = make_client(handler)
    asyncio.run(client.recognize(IMAGE))

    request = captured["request"]
    body = request.content
    assert request.method == "POST"
    assert str(request.url) == OCR_URL
    assert request.headers["content-type"].startswith("multipart/form-data")
    for name, value in [
        (b"apikey", b"test-key"), (b"language", b"eng"), (b"isOverlayRequired", b"false"),
        (b"detectOrientation", b"false"), (b"isTable", b"false"), (b"scale", b"true"),
        (b"OCREngine", b"2"),
    ]:
        assert b'name="' + name + b'"\r\n\r\n' + value in body
    assert b'name="file"; filename="receipt.jpg"' in body
    assert b"Content-Type: image/jpeg" in body
    assert b"fake-jpeg" in body


def test_returns_first_parsed_text():
    client = make_client(json_handler({
        "ParsedResults": [{"ParsedText": "Momo House\r\nTotal: Rs. 480\r\n"}, {"ParsedText": "ignored"}],
        "IsErroredOnProcessing": False,
    }))
    text = asyncio.run(client.recognize(IMAGE))
    assert text.text == "Momo House\r\nTotal: Rs. 480\r\n"


def test_one_call_per_image_without_retry():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, text="busy")

    client = make_client(handler)
    with pytest.raises(RecognitionTransportError):
        asyncio.run(client.recognize(IMAGE))
    assert len(calls) == 1


def test_http_error_status():
    client = make_client(lambda request: httpx.Response(500, text="server exploded"))
    with pytest.raises(RecognitionTransportError) as exc:
        asyncio.run(client.recognize(IMAGE))
    assert exc.value.status_code == 500
    assert "server exploded" in exc.value.reason


def test_transport_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(RecognitionTransportError):
        asyncio.run(client.recognize(IMAGE))


def test_service_error_messages():
    client = make_client(json_handler({
        "ErrorMessage": ["Invalid API key", "Try again"],
        "IsErroredOnProcessing": True,
    }))
    with pytest.raises(RecognitionServiceError) as exc:
        asyncio.run(client.recognize(IMAGE))
    assert exc.value.messages == ["Invalid API key", "Try again"]
    assert exc.value.reason == "OCR.space error: Invalid API key, Try again"


def test_service_error_as_plain_string():
    client = make_client(json_handler({"ErrorMessage": "Timed out waiting for results"}))
    with pytest.raises(RecognitionServiceError):
        asyncio.run(client.recognize(IMAGE))


def test_non_json_body():
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(RecognitionServiceError):
        asyncio.run(client.recognize(IMAGE))


@pytest.mark.parametrize("payload", [
    {"ParsedResults": [{"ParsedText": "  \r\n "}]},
    {"ParsedResults": [{"ParsedText": None}]},
    {"ParsedResults": []},
    {},
])
def test_blank_results_are_no_text_detected(payload):
    client = make_client(json_handler(payload))
    with pytest.raises(NoTextDetected):
        asyncio.run(client.recognize(IMAGE))


def test_all_failures_share_one_base():
    for error in (RecognitionTransportError("x"), RecognitionServiceError("y"), NoTextDetected()):
        assert isinstance(error, RecognitionError)


def test_raw_bytes_are_wrapped_as_jpeg():
    captured = {}

    def handler(request):
        captured["body"] = request.content
        return httpx.Response(200, json={"ParsedResults": [{"ParsedText": "ok text"}]})

    client = make_client(handler)
    asyncio.run(client.recognize(b"raw-bytes"))
    assert b"Content-Type: image/jpeg" in captured["body"]


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("OCR_SPACE_API_KEY", "env-key")
    monkeypatch.setenv("OCR_SPACE_LANGUAGE", "hin")
    monkeypatch.setenv("OCR_SPACE_ENGINE", "1")
    with patch("expense_scan.ocr.ocr_space_client.load_dotenv"):
        client = OcrSpaceClient()
    form = client.build_form()
    assert form["apikey"] == "env-key"
    assert form["language"] == "hin"
    assert form["OCREngine"] == "1"


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("OCR_SPACE_API_KEY", raising=False)
    with patch("expense_scan.ocr.ocr_space_client.load_dotenv"):
        with pytest.raises(ValueError):
            OcrSpaceClient()


@pytest.mark.parametrize("payload", [
    {"ParsedResults": {"0": {"ParsedText": 5}}},
    {"ParsedResults": "Cafe Total 10"},
    {"ParsedResults": [{"ParsedText": 5}]},
    {"ParsedResults": [{"ParsedText": ["Cafe"]}]},
    {"ParsedResults": ["Cafe Total 10"]},
    ["not", "a", "dict"],
])
def test_malformed_bodies_are_service_errors(payload):
    client = make_client(json_handler(payload))
    with pytest.raises(RecognitionServiceError):
        asyncio.run(client.recognize(IMAGE))


def test_explicit_zero_timeout_is_kept(monkeypatch):
    monkeypatch.setenv("OCR_SPACE_TIMEOUT", "45")
    client = make_client(json_handler({}), timeout=0)
    assert client.timeout == 0.0


def test_timeout_from_environment(monkeypatch):
    monkeypatch.setenv("OCR_SPACE_TIMEOUT", "45")
    client = make_client(json_handler({}))
    assert client.timeout == 45.0
