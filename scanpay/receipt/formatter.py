"""Format Receipt data and bill splits for display and JSON output."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

from scanpay.domain.receipt import Receipt, ReceiptWarning

if TYPE_CHECKING:
    from scanpay.application.split import BillSplitter


def _money(value: Decimal) -> str:
    return f"${value:.2f}"


def _format_rows_aligned(rows: list[tuple[str, str]], indent: str = "  ") -> list[str]:
    """
    Format (label, amount) rows with right-aligned amounts.

    Args:
        rows: List of (label, amount_text) tuples
        indent: Indentation prefix for each line

    Returns:
        Formatted lines
    """
    if not rows:
        return []
    max_label_len = max(len(label) for label, _ in rows)
    max_amount_len = max(len(amount) for _, amount in rows)
    return [f"{indent}{label.ljust(max_label_len)}  {amount.rjust(max_amount_len)}" for label, amount in rows]


def _build_item_warning_map(warnings: tuple[ReceiptWarning, ...], item_count: int) -> dict[int, list[str]]:
    """Map item indexes to parser warnings; unanchored ones go to -1."""
    item_warnings: dict[int, list[str]] = {}
    for warning in warnings:
        if not warning.message:
            continue
        if warning.after_item_index is None or item_count == 0:
            idx = -1
        else:
            idx = max(0, min(warning.after_item_index, item_count - 1))
        item_warnings.setdefault(idx, []).append(warning.message)
    return item_warnings


def format_parsed_receipt(receipt: Receipt) -> str:
    """Render a parsed receipt as a plain-text review block."""
    info = receipt.restaurant_info
    lines: list[str] = ["=" * 60, "PARSED RECEIPT", "=" * 60]
    if info.name:
        lines.append(f"Restaurant: {info.name}")
    for address_line in info.address:
        lines.append(f"            {address_line}")
    if info.phone:
        lines.append(f"Phone: {info.phone}")
    if info.date:
        lines.append(f"Date: {info.date}")
    if info.order_number:
        lines.append(f"Order: {info.order_number}")
    if receipt.vendor_template:
        lines.append(f"Layout: {receipt.vendor_template}")

    item_warnings = _build_item_warning_map(receipt.warnings, len(receipt.items))
    lines.append(f"\nItems ({len(receipt.items)}):")
    for msg in item_warnings.get(-1, []):
        lines.append(f"  ; WARN:PARSER {msg}")
    for i, item in enumerate(receipt.items):
        qty_str = f" x{item.quantity}" if item.quantity > 1 else ""
        lines.append(f"  {i + 1}. {item.name}{qty_str} - {_money(item.price)}")
        for modifier in item.modifiers:
            lines.append(f"       * {modifier}")
        for msg in item_warnings.get(i, []):
            lines.append(f"  ; WARN:PARSER {msg}")

    subtotal_label = "Subtotal (computed)" if receipt.subtotal_is_derived else "Subtotal"
    total_label = "Total (computed)" if receipt.grand_total_is_derived else "Total"
    lines.append("")
    lines.extend(
        _format_rows_aligned(
            [
                (subtotal_label, _money(receipt.subtotal)),
                ("Tax", _money(receipt.tax)),
                (total_label, _money(receipt.grand_total)),
            ]
        )
    )
    lines.append("=" * 60)
    lines.append(receipt.status_message)
    return "\n".join(lines) + "\n"


def format_split_summary(splitter: BillSplitter) -> str:
    """Render each person's share and the grand total."""
    totals = splitter.totals()
    rows = [(person.name, _money(totals[person.id])) for person in splitter.people]
    lines = ["Summary"]
    lines.extend(_format_rows_aligned(rows))
    unassigned = splitter.unassigned_items()
    if unassigned:
        names = ", ".join(item.name for item in unassigned)
        lines.append(f"  (unclaimed: {names})")
    lines.extend(_format_rows_aligned([("Grand Total", _money(splitter.grand_total()))]))
    return "\n".join(lines) + "\n"


def receipt_to_dict(receipt: Receipt) -> dict[str, Any]:
    """JSON-ready view of a receipt. Money is rendered as 2-decimal strings."""
    info = receipt.restaurant_info
    return {
        "id": receipt.id,
        "status": receipt.status,
        "restaurant_info": {
            "name": info.name,
            "address": list(info.address),
            "phone": info.phone,
            "date": info.date,
            "order_number": info.order_number,
        },
        "items": [
            {
                "id": item.id,
                "name": item.name,
                "price": f"{item.price:.2f}",
                "quantity": item.quantity,
                "modifiers": list(item.modifiers),
            }
            for item in receipt.items
        ],
        "subtotal": f"{receipt.subtotal:.2f}",
        "tax": f"{receipt.tax:.2f}",
        "grand_total": f"{receipt.grand_total:.2f}",
        "subtotal_is_derived": receipt.subtotal_is_derived,
        "grand_total_is_derived": receipt.grand_total_is_derived,
        "vendor_template": receipt.vendor_template,
        "warnings": [w.message for w in receipt.warnings],
    }


def split_to_dict(splitter: BillSplitter) -> dict[str, Any]:
    """JSON-ready view of people, their claims and their totals."""
    totals = splitter.totals()
    return {
        "people": [
            {
                "id": person.id,
                "name": person.name,
                "color": person.color,
                "items": [item.id for item in splitter.items_for(person.id)],
                "total": f"{totals[person.id]:.2f}",
            }
            for person in splitter.people
        ],
        "grand_total": f"{splitter.grand_total():.2f}",
    }
