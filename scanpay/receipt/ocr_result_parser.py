"""Parse recognized receipt lines into structured Receipt data."""

from collections.abc import Sequence
from decimal import Decimal

from scanpay.domain.parser_rules import ParserLimits, VendorTemplate
from scanpay.domain.receipt import Receipt, ReceiptItem, ReceiptWarning
from scanpay.runtime import get_logger

from .ocr_parser import (
    DEFAULT_LIMITS,
    SummaryAmounts,
    _classify_lines,
    _extract_items,
    _extract_restaurant_info,
    _extract_summary,
    _normalize_lines,
)
from .vendor_templates import apply_vendor_override

logger = get_logger(__name__)

ZERO = Decimal("0.00")


def _sum_prices(items: Sequence[ReceiptItem]) -> Decimal:
    return sum((item.price for item in items), ZERO)


def _reconcile_warnings(
    items: Sequence[ReceiptItem],
    summary: SummaryAmounts,
    subtotal: Decimal,
    grand_total: Decimal,
) -> list[ReceiptWarning]:
    """Flag printed amounts that disagree with each other or with the items."""
    warnings: list[ReceiptWarning] = []
    if summary.subtotal is not None and items:
        item_sum = _sum_prices(items)
        if item_sum != summary.subtotal:
            warnings.append(
                ReceiptWarning(
                    message=f"item prices sum to {item_sum:.2f} but printed subtotal is {summary.subtotal:.2f}",
                    after_item_index=len(items) - 1,
                )
            )
    if grand_total < subtotal:
        warnings.append(ReceiptWarning(message=f"grand total {grand_total:.2f} is below subtotal {subtotal:.2f}"))
    return warnings


def parse_receipt(
    lines: Sequence[str],
    limits: ParserLimits = DEFAULT_LIMITS,
    vendor_templates: Sequence[VendorTemplate] = (),
) -> Receipt:
    """
    Parse recognized text lines into a Receipt.

    This is a best-effort parser and never raises for content problems: a
    receipt with no recognizable items comes back with ``status == "empty"``.

    Pipeline: classify lines -> extract items and metadata/summary ->
    optional vendor override -> derive missing totals -> assemble.

    Args:
        lines: Recognized text lines in top-to-bottom reading order
        limits: Price reasonableness bounds
        vendor_templates: Known vendor layouts, loaded by runtime components

    Returns:
        Receipt object with parsed data
    """
    texts = _normalize_lines(lines)
    warnings: list[ReceiptWarning] = []

    classified = _classify_lines(texts)
    items = tuple(_extract_items(classified, limits.item, warning_sink=warnings))
    info = _extract_restaurant_info(classified)
    summary = _extract_summary(classified, limits)

    info, items, summary, template = apply_vendor_override(
        info,
        items,
        summary,
        texts,
        vendor_templates,
        limits,
    )

    tax = summary.tax if summary.tax is not None else ZERO
    subtotal_is_derived = summary.subtotal is None
    if summary.subtotal is not None:
        subtotal = summary.subtotal
    else:
        subtotal = _sum_prices(items)
    grand_total_is_derived = summary.total is None
    grand_total = summary.total if summary.total is not None else subtotal + tax

    warnings.extend(_reconcile_warnings(items, summary, subtotal, grand_total))

    receipt = Receipt(
        items=items,
        subtotal=subtotal,
        tax=tax,
        grand_total=grand_total,
        restaurant_info=info,
        subtotal_is_derived=subtotal_is_derived,
        grand_total_is_derived=grand_total_is_derived,
        vendor_template=template.name if template is not None else None,
        warnings=tuple(warnings),
    )
    logger.debug(
        "Parsed receipt %s: %d items, subtotal=%s tax=%s total=%s (%s)",
        receipt.id,
        len(receipt.items),
        receipt.subtotal,
        receipt.tax,
        receipt.grand_total,
        receipt.status,
    )
    return receipt
