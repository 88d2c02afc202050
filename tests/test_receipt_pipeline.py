"""OCR service client tests with httpx stand-ins."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import httpx
import pytest

from scanpay.runtime import receipt_pipeline
from scanpay.runtime.receipt_pipeline import RecognitionError, call_ocr_service, call_ocr_service_async


def _bbox(x0: int, y0: int, x1: int, y1: int) -> list[list[int]]:
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1]]


OCR_PAYLOAD = {
    "status": "success",
    "image_width": 800,
    "image_height": 600,
    "detections": [
        [_bbox(20, 20, 300, 60), ["Cafe X", 0.99]],
        [_bbox(20, 100, 300, 140), ["1 Soup", 0.99]],
        [_bbox(500, 100, 650, 140), ["$5.00", 0.99]],
        [_bbox(20, 180, 300, 220), ["Total", 0.99]],
        [_bbox(500, 180, 650, 220), ["$5.00", 0.99]],
    ],
}


def _image(tmp_path: Path) -> Path:
    image = tmp_path / "receipt.jpg"
    image.write_bytes(b"\xff\xd8fake-jpeg")
    return image


def test_call_ocr_service_posts_image_and_returns_lines(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    def fake_post(url: str, files: dict[str, Any], timeout: float) -> httpx.Response:
        captured["url"] = url
        captured["files"] = files
        return httpx.Response(200, json=OCR_PAYLOAD)

    monkeypatch.setattr(receipt_pipeline.httpx, "post", fake_post)

    lines = call_ocr_service(_image(tmp_path), "http://ocr.local:8001/")

    assert lines == ["Cafe X", "1 Soup $5.00", "Total $5.00"]
    assert captured["url"] == "http://ocr.local:8001/ocr"
    assert captured["files"]["file"][0] == "receipt.jpg"


def test_call_ocr_service_connection_failure_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, files: dict[str, Any], timeout: float) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(receipt_pipeline.httpx, "post", fake_post)

    with pytest.raises(RecognitionError, match="Failed to connect"):
        call_ocr_service(_image(tmp_path), "http://ocr.local:8001")


@pytest.mark.parametrize(
    ("response", "message"),
    [
        (httpx.Response(503, text="busy"), "OCR service error: 503"),
        (httpx.Response(200, content=b"<html>"), "invalid JSON"),
        (httpx.Response(200, json={"status": "error"}), "failed recognition"),
        (httpx.Response(200, json={"detections": [["not-a-detection"]]}), "Malformed"),
    ],
)
def test_call_ocr_service_unusable_responses_raise(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    response: httpx.Response,
    message: str,
) -> None:
    monkeypatch.setattr(receipt_pipeline.httpx, "post", lambda url, files, timeout: response)

    with pytest.raises(RecognitionError, match=message):
        call_ocr_service(_image(tmp_path), "http://ocr.local:8001")


def test_call_ocr_service_async_uses_same_validation(monkeypatch: pytest.MonkeyPatch) -> None:
    real_client = httpx.AsyncClient
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=OCR_PAYLOAD)

    monkeypatch.setattr(
        receipt_pipeline.httpx,
        "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )

    lines = asyncio.run(call_ocr_service_async(b"bytes", "upload.png", "http://ocr.local:8001", "image/png"))

    assert lines == ["Cafe X", "1 Soup $5.00", "Total $5.00"]
    assert seen == ["http://ocr.local:8001/ocr"]
