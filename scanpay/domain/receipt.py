"""Data models for receipt scanning."""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Literal

ParseStatus = Literal["empty", "complete"]


def new_id() -> str:
    """Return a fresh opaque identifier for receipts, items and people."""
    return uuid.uuid4().hex


class Section(Enum):
    """Receipt region the line classifier is currently inside."""

    NONE = "none"
    ITEMS = "items"
    SUMMARY = "summary"


class LineRole(Enum):
    """Semantic role assigned to one OCR line. Exactly one per line."""

    RESTAURANT_NAME = "restaurant_name"
    ADDRESS_LINE = "address_line"
    PHONE = "phone"
    DATE = "date"
    ORDER_NUMBER = "order_number"
    ITEMS_HEADER = "items_header"
    SUMMARY_HEADER = "summary_header"
    ITEM_CANDIDATE = "item_candidate"
    MODIFIER_CANDIDATE = "modifier_candidate"
    SUBTOTAL_LINE = "subtotal_line"
    TAX_LINE = "tax_line"
    TOTAL_LINE = "total_line"
    UNCLASSIFIED = "unclassified"

    @property
    def is_metadata(self) -> bool:
        return self in (
            LineRole.RESTAURANT_NAME,
            LineRole.ADDRESS_LINE,
            LineRole.PHONE,
            LineRole.DATE,
            LineRole.ORDER_NUMBER,
        )


@dataclass(frozen=True)
class RawLine:
    """One recognized text line, in reading order."""

    index: int
    text: str


@dataclass(frozen=True)
class ReceiptItem:
    """A single line item on a receipt.

    Identity is ``id``: two items with the same name and price are distinct.
    Who claimed an item is tracked by the bill splitter, not here.
    """

    name: str
    price: Decimal
    modifiers: tuple[str, ...] = ()
    # Leading quantity token from the receipt line. Informational only;
    # ``price`` is already the printed line total.
    quantity: int = 1
    id: str = field(default_factory=new_id)

    @property
    def is_add_on(self) -> bool:
        """Zero-price lines printed as their own row (free add-ons)."""
        return self.price == 0


@dataclass(frozen=True)
class RestaurantInfo:
    """Best-effort merchant metadata. Every field may be empty."""

    name: str = ""
    address: tuple[str, ...] = ()
    phone: str = ""
    date: str = ""
    order_number: str = ""


@dataclass(frozen=True)
class ReceiptWarning:
    """Parser warning attached to a nearby item position."""

    message: str
    # Anchor after this item index when formatting. None means no anchor.
    after_item_index: int | None = None


@dataclass(frozen=True)
class Receipt:
    """Parsed receipt data. Replaced wholesale on every new scan."""

    items: tuple[ReceiptItem, ...] = ()
    subtotal: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    grand_total: Decimal = Decimal("0.00")
    restaurant_info: RestaurantInfo = field(default_factory=RestaurantInfo)
    # True when the value was computed rather than read from the receipt.
    subtotal_is_derived: bool = False
    grand_total_is_derived: bool = False
    vendor_template: str | None = None
    warnings: tuple[ReceiptWarning, ...] = ()
    id: str = field(default_factory=new_id)

    @property
    def status(self) -> ParseStatus:
        return "complete" if self.items else "empty"

    @property
    def status_message(self) -> str:
        return "Processing complete" if self.items else "No items detected"

    def find_item(self, item_id: str) -> ReceiptItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None
