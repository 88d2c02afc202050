"""Restaurant metadata and summary amount extraction helpers."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from scanpay.domain.receipt import LineRole, RestaurantInfo

from .common import DEFAULT_LIMITS, ParserLimits, _extract_price
from .line_classifier import ClassifiedLine


@dataclass(frozen=True)
class SummaryAmounts:
    """Printed summary amounts. None means the receipt did not show it."""

    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None


def _extract_restaurant_info(classified: Iterable[ClassifiedLine]) -> RestaurantInfo:
    """
    Collect metadata lines into RestaurantInfo.

    Address lines accumulate in order. Phone, date and order number keep the
    first match; later matches never overwrite.
    """
    name = ""
    address: list[str] = []
    phone = ""
    receipt_date = ""
    order_number = ""

    for line in classified:
        text = line.text.strip()
        if line.role is LineRole.RESTAURANT_NAME and not name:
            name = text
        elif line.role is LineRole.ADDRESS_LINE:
            address.append(text)
        elif line.role is LineRole.PHONE and not phone:
            phone = text
        elif line.role is LineRole.DATE and not receipt_date:
            receipt_date = text
        elif line.role is LineRole.ORDER_NUMBER and not order_number:
            order_number = text

    return RestaurantInfo(
        name=name,
        address=tuple(address),
        phone=phone,
        date=receipt_date,
        order_number=order_number,
    )


def _extract_price_from_summary_line(line: str, max_reasonable: Decimal) -> Decimal | None:
    """Extract a summary amount, preferring the text after a colon."""
    if ":" in line:
        _, after_colon = line.split(":", 1)
        match = _extract_price(after_colon, max_reasonable)
        if match is not None:
            return match.value
    match = _extract_price(line, max_reasonable)
    return match.value if match is not None else None


def _extract_summary(
    classified: Iterable[ClassifiedLine],
    limits: ParserLimits = DEFAULT_LIMITS,
) -> SummaryAmounts:
    """
    Extract subtotal, tax and total from summary lines.

    The first line of each kind that yields a plausible price wins. Fields
    with no plausible price stay None so the assembler can derive them.
    """
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None

    for line in classified:
        if line.role is LineRole.SUBTOTAL_LINE and subtotal is None:
            subtotal = _extract_price_from_summary_line(line.text, limits.summary)
        elif line.role is LineRole.TAX_LINE and tax is None:
            tax = _extract_price_from_summary_line(line.text, limits.tax)
        elif line.role is LineRole.TOTAL_LINE and total is None:
            total = _extract_price_from_summary_line(line.text, limits.summary)

    return SummaryAmounts(subtotal=subtotal, tax=tax, total=total)
