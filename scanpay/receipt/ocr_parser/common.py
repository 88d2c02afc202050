"""Shared constants and helpers for OCR receipt parsing."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from scanpay.domain.parser_rules import ParserLimits

DEFAULT_LIMITS = ParserLimits()
ITEM_PRICE_LIMIT = DEFAULT_LIMITS.item

# Optional currency symbol, then either a comma-grouped amount ("1,234.56")
# or an integer part with an optional 2-digit fraction using '.' or ','.
# Lookarounds keep us from starting or ending inside a longer number.
PRICE_PATTERN = re.compile(
    r"(?<![\d.,])(?P<symbol>[$€£]\s?)?"
    r"(?P<amount>(?P<grouped>\d{1,3}(?:,\d{3})+(?:\.\d{2})?)|\d+(?:[.,]\d{2})?)"
    r"(?![\d])"
)

# A price that clearly reads as money: has a currency symbol or cents.
MONEY_LIKE_PATTERN = re.compile(r"[$€£]\s?\d|\d[.,]\d{2}(?!\d)")

# Item-section headers: column titles printed above the item rows.
ITEMS_HEADER_PATTERN = re.compile(r"\b(DESCRIPTION|QTY|QT|ITEMS?)\b")
SUMMARY_HEADER_PATTERN = re.compile(r"^\s*(ORDER\s+|PAYMENT\s+)?SUMMARY\s*:?\s*$", re.IGNORECASE)

LEADING_QUANTITY_PATTERN = re.compile(r"^(\d+)\s")
MODIFIER_PREFIX = "*"
DOT_LEADER_PATTERN = re.compile(r"\s*\.{2,}\s*$")

# Metadata patterns for the lines right under the restaurant name.
US_STATE_CODES = (
    "AL|AK|AZ|AR|CA|CO|CT|DE|DC|FL|GA|HI|ID|IL|IN|IA|KS|KY|LA|ME|MD|MA|MI|MN|MS|MO|MT|NE|NV|NH|NJ|NM|NY|"
    "NC|ND|OH|OK|OR|PA|RI|SC|SD|TN|TX|UT|VT|VA|WA|WV|WI|WY"
)
# Region code only counts when a ZIP code follows it ("CA 94607").
REGION_CODE_PATTERN = re.compile(rf"\b({US_STATE_CODES})\s+\d{{5}}(?:-\d{{4}})?\b")
STREET_TYPE_PATTERN = re.compile(
    r"\b(ST|STREET|AVE|AVENUE|RD|ROAD|BLVD|BOULEVARD|DR|DRIVE|LN|LANE|WAY|HWY|HIGHWAY|PKWY|PLAZA|SUITE|STE)\b\.?",
    re.IGNORECASE,
)
YEAR_FRAGMENT_PATTERN = re.compile(r"(?<!\d)\d{3,4}(?!\d)")
METADATA_WINDOW = range(1, 5)


@dataclass(frozen=True)
class PriceMatch:
    """A lexed price and the character span it occupied (symbol included)."""

    value: Decimal
    start: int
    end: int


def _extract_price(line: str, max_reasonable: Decimal = ITEM_PRICE_LIMIT) -> PriceMatch | None:
    """
    Extract the rightmost plausible currency amount from a line.

    Receipts print quantity before price, so the last numeric match wins.
    A value above ``max_reasonable`` rejects the line outright instead of
    falling back to an earlier match.

    Args:
        line: Text line to lex
        max_reasonable: Upper bound for a plausible price at this call site

    Returns:
        PriceMatch, or None if the line has no acceptable price
    """
    matches = list(PRICE_PATTERN.finditer(line))
    if not matches:
        return None
    match = matches[-1]
    if match.group("grouped"):
        amount = match.group("amount").replace(",", "")
    else:
        amount = match.group("amount").replace(",", ".")
    try:
        value = Decimal(amount)
    except InvalidOperation:
        return None
    if value > max_reasonable:
        return None
    if "." not in amount:
        value = value.quantize(Decimal("0.01"))
    return PriceMatch(value=value, start=match.start(), end=match.end())


def _looks_money_like(line: str) -> bool:
    """Return True if the line carries a price with a currency symbol or cents."""
    return MONEY_LIKE_PATTERN.search(line) is not None


def _strip_leading_quantity(text: str) -> tuple[int, str]:
    """Split a leading quantity token like ``"2 "`` off an item line."""
    match = LEADING_QUANTITY_PATTERN.match(text)
    if not match:
        return 1, text
    quantity = int(match.group(1))
    return max(quantity, 1), text[match.end() :]


def _clean_item_name(line: str, price: PriceMatch) -> tuple[int, str]:
    """Remove the price span and leading quantity from an item line."""
    text = (line[: price.start] + " " + line[price.end :]).strip()
    quantity, text = _strip_leading_quantity(text)
    text = DOT_LEADER_PATTERN.sub("", text)
    text = re.sub(r"\s+", " ", text)
    return quantity, text.strip()


def _is_modifier_text(line: str) -> bool:
    return line.strip().startswith(MODIFIER_PREFIX)


def _clean_modifier(line: str) -> str:
    return line.strip().lstrip(MODIFIER_PREFIX).strip()


def _contains_subtotal(line: str) -> bool:
    return "SUBTOTAL" in line.upper()


def _contains_tax(line: str) -> bool:
    return "TAX" in line.upper()


def _contains_grand_total(line: str) -> bool:
    upper = line.upper()
    return "TOTAL" in upper and "SUBTOTAL" not in upper


def _looks_like_summary_line(line: str) -> bool:
    """Return True if the line opens or belongs to the summary block."""
    return _contains_subtotal(line) or _contains_tax(line) or _contains_grand_total(line)


def _is_items_header(line: str) -> bool:
    return ITEMS_HEADER_PATTERN.search(line) is not None
