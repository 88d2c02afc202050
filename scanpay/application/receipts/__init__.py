"""Receipt workflows."""

from scanpay.application.receipts.scan import ReceiptScanRequest, ReceiptScanResult, parse_lines, run_receipt_scan

__all__ = [
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "parse_lines",
    "run_receipt_scan",
]
