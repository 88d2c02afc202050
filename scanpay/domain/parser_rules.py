"""Configurable parser policy: price bounds and vendor templates."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ParserLimits:
    """Per-call-site price bounds.

    A lexed amount above the bound is treated as an OCR misread (phone digits,
    order numbers) rather than a price.
    """

    item: Decimal = Decimal("1000")
    tax: Decimal = Decimal("200")
    summary: Decimal = Decimal("1000")


@dataclass(frozen=True)
class VendorTemplate:
    """Hand-tuned layout rules for one known restaurant."""

    name: str
    keywords: tuple[str, ...]  # upper-cased restaurant-name fragments
    address: tuple[str, ...] = ()  # exact address substrings
    phone: str = ""  # exact phone substring
    items_header: str = ""  # exact substring of the item-section header line

    def matches(self, restaurant_name: str) -> bool:
        upper = restaurant_name.upper()
        return any(keyword in upper for keyword in self.keywords)
