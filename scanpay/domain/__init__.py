"""Core domain models for scanpay.

This module provides the core data models used throughout the project:
- Receipt, ReceiptItem, RestaurantInfo: parsed receipt models
- LineRole, RawLine, Section: line classification vocabulary
- Person, compute_person_total: bill-splitting models and math

Usage:
    from scanpay.domain import Receipt, ReceiptItem, Person
"""

from scanpay.domain.parser_rules import ParserLimits, VendorTemplate
from scanpay.domain.receipt import (
    LineRole,
    ParseStatus,
    RawLine,
    Receipt,
    ReceiptItem,
    ReceiptWarning,
    RestaurantInfo,
    Section,
    new_id,
)
from scanpay.domain.split import PERSON_PALETTE, Person, claimed_subtotal, compute_person_total, quantize_money

__all__ = [
    "LineRole",
    "ParserLimits",
    "VendorTemplate",
    "ParseStatus",
    "RawLine",
    "Receipt",
    "ReceiptItem",
    "ReceiptWarning",
    "RestaurantInfo",
    "Section",
    "new_id",
    "PERSON_PALETTE",
    "Person",
    "claimed_subtotal",
    "compute_person_total",
    "quantize_money",
]
