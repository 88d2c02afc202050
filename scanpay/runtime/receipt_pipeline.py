"""Runtime helpers for the receipt OCR round trip (non-HTTP-server)."""

import time
from pathlib import Path
from typing import Any

import httpx

from scanpay.receipt.ocr_helpers import transform_ocr_result
from scanpay.runtime.logging import get_logger

logger = get_logger(__name__)

OCR_TIMEOUT_SECONDS = 60.0


class RecognitionError(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an unusable result."""


def _ocr_endpoint(ocr_url: str) -> str:
    return f"{ocr_url.rstrip('/')}/ocr"


def _lines_from_response(response: httpx.Response) -> list[str]:
    """Validate an OCR service response and turn it into ordered lines."""
    if response.status_code != 200:
        logger.error("OCR service error: %s", response.status_code)
        raise RecognitionError(f"OCR service error: {response.status_code}")

    try:
        raw_result: Any = response.json()
    except ValueError as exc:
        raise RecognitionError("OCR service returned invalid JSON") from exc

    if not isinstance(raw_result, dict) or raw_result.get("status", "success") != "success":
        raise RecognitionError("OCR service reported a failed recognition")

    try:
        return transform_ocr_result(raw_result)
    except (KeyError, TypeError, ValueError) as exc:
        raise RecognitionError(f"Malformed OCR detections: {exc}") from exc


def call_ocr_service(receipt_path: Path, ocr_url: str) -> list[str]:
    """
    Send an image to the OCR service and return its recognized lines.

    Raises:
        RecognitionError: if the service is unreachable or the result unusable.
    """
    logger.info("Sending receipt to OCR service at %s...", ocr_url)
    image_bytes = receipt_path.read_bytes()

    try:
        start_time = time.time()
        response = httpx.post(
            _ocr_endpoint(ocr_url),
            files={"file": (receipt_path.name, image_bytes, "image/jpeg")},
            timeout=OCR_TIMEOUT_SECONDS,
        )
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise RecognitionError(f"Failed to connect to OCR service: {e}") from e

    return _lines_from_response(response)


async def call_ocr_service_async(
    image_bytes: bytes,
    filename: str,
    ocr_url: str,
    content_type: str = "image/jpeg",
) -> list[str]:
    """Async twin of call_ocr_service for the upload server."""
    try:
        async with httpx.AsyncClient(timeout=OCR_TIMEOUT_SECONDS) as client:
            response = await client.post(
                _ocr_endpoint(ocr_url),
                files={"file": (filename, image_bytes, content_type)},
            )
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise RecognitionError(f"Failed to connect to OCR service: {e}") from e

    return _lines_from_response(response)
