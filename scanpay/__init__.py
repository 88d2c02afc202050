"""scanpay: turn OCR'd restaurant receipts into structured bills and split them."""

__version__ = "0.1.0"
