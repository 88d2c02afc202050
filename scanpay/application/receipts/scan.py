"""Receipt scan workflow orchestration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from scanpay.domain.receipt import Receipt
from scanpay.receipt.ocr_result_parser import parse_receipt
from scanpay.runtime import get_logger, load_parser_limits, load_vendor_templates
from scanpay.runtime.receipt_pipeline import RecognitionError, call_ocr_service

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "recognition_failed",
    "no_items",
    "complete",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    ocr_url: str
    recognize: Callable[[Path, str], list[str]] | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    receipt: Receipt | None = None
    lines: tuple[str, ...] = ()
    error: str | None = None


def parse_lines(lines: list[str] | tuple[str, ...]) -> Receipt:
    """Parse recognized lines with the runtime-configured limits and templates."""
    return parse_receipt(
        lines,
        limits=load_parser_limits(),
        vendor_templates=load_vendor_templates(),
    )


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: OCR -> parse -> report outcome."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    recognize = request.recognize or call_ocr_service
    try:
        lines = recognize(request.image_path, request.ocr_url)
    except RecognitionError as exc:
        return ReceiptScanResult(status="recognition_failed", error=str(exc))

    receipt = parse_lines(lines)
    logger.info(
        "Parsed %s: %d items, total %s",
        request.image_path.name,
        len(receipt.items),
        receipt.grand_total,
    )
    return ReceiptScanResult(
        status="complete" if receipt.status == "complete" else "no_items",
        receipt=receipt,
        lines=tuple(lines),
    )
