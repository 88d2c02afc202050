"""End-to-end parser behavior on recognized line sequences."""

from __future__ import annotations

from decimal import Decimal

import pytest

from scanpay.domain.parser_rules import ParserLimits
from scanpay.receipt.ocr_result_parser import parse_receipt


def _summary(receipt) -> list[tuple[str, Decimal, tuple[str, ...]]]:
    return [(item.name, item.price, item.modifiers) for item in receipt.items]


def test_simple_receipt_with_printed_totals() -> None:
    receipt = parse_receipt(["Cafe X", "1 Soup $5.00", "1 Bread $2.00", "Subtotal $7.00", "Tax $0.50", "Total $7.50"])

    assert [(item.name, item.price) for item in receipt.items] == [
        ("Soup", Decimal("5.00")),
        ("Bread", Decimal("2.00")),
    ]
    assert receipt.subtotal == Decimal("7.00")
    assert receipt.tax == Decimal("0.50")
    assert receipt.grand_total == Decimal("7.50")
    assert receipt.restaurant_info.name == "Cafe X"
    assert not receipt.subtotal_is_derived
    assert not receipt.grand_total_is_derived
    assert receipt.status == "complete"
    assert receipt.status_message == "Processing complete"


def test_modifier_line_attaches_to_item() -> None:
    receipt = parse_receipt(["1 Soup $5.00", "* No Salt"])

    assert _summary(receipt) == [("Soup", Decimal("5.00"), ("No Salt",))]


def test_missing_subtotal_is_derived_from_items() -> None:
    receipt = parse_receipt(["1 Soup $5.00", "1 Bread $2.00", "Total $7.50"])

    assert receipt.subtotal == Decimal("7.00")
    assert receipt.subtotal_is_derived
    assert receipt.tax == Decimal("0.00")
    assert receipt.grand_total == Decimal("7.50")


def test_implausible_tax_amount_falls_back_to_zero() -> None:
    receipt = parse_receipt(
        ["Cafe X", "1 Soup $5.00", "1 Bread $2.00", "Subtotal $7.00", "Total $7.50", "Tax Order #88888888"]
    )

    assert receipt.tax == Decimal("0.00")
    assert receipt.grand_total == Decimal("7.50")


def test_missing_total_is_subtotal_plus_tax() -> None:
    receipt = parse_receipt(["Cafe X", "1 Soup $5.00", "1 Bread $2.00", "Subtotal $7.00", "Tax $0.63"])

    assert receipt.grand_total == Decimal("7.63")
    assert receipt.grand_total_is_derived


@pytest.mark.parametrize(
    "lines",
    [
        ["Noodle Bar", "1 Ramen $14.25", "1 Gyoza $6.10", "Tax $1.83"],
        ["1 Tea 2.00", "1 Tea 2.00", "1 Cake 4,75"],
        ["Diner", "QTY ITEM", "2 Eggs 6.00", "* over easy", "Coffee 2.50", "Refill 0.00"],
    ],
)
def test_derived_totals_match_item_sum(lines: list[str]) -> None:
    receipt = parse_receipt(lines)

    assert receipt.subtotal_is_derived
    assert receipt.subtotal == sum((item.price for item in receipt.items), Decimal("0.00"))
    assert receipt.grand_total == receipt.subtotal + receipt.tax


def test_parse_is_idempotent_except_for_ids() -> None:
    lines = ["Cafe X", "QTY ITEM", "1 Burger 12.00", "* no onions", "1 Fries 4.00", "Subtotal 16.00", "Total 17.28"]

    first = parse_receipt(lines)
    second = parse_receipt(lines)

    assert _summary(first) == _summary(second)
    assert first.id != second.id
    assert [item.id for item in first.items] != [item.id for item in second.items]


def test_no_items_is_a_reportable_empty_receipt() -> None:
    receipt = parse_receipt(["CUSTOMER RECEIPT", "Thank you for dining!", "=========="])

    assert receipt.items == ()
    assert receipt.status == "empty"
    assert receipt.status_message == "No items detected"
    assert receipt.subtotal == Decimal("0.00")
    assert receipt.grand_total == Decimal("0.00")


def test_empty_input_never_raises() -> None:
    receipt = parse_receipt([])

    assert receipt.status == "empty"


def test_subtotal_disagreeing_with_items_is_flagged() -> None:
    receipt = parse_receipt(["Cafe X", "1 Soup $5.00", "1 Bread $2.00", "Subtotal $9.00", "Total $9.50"])

    assert receipt.subtotal == Decimal("9.00")
    assert any("printed subtotal" in warning.message for warning in receipt.warnings)


def test_custom_item_limit_rejects_expensive_lines() -> None:
    receipt = parse_receipt(["1 Wagyu $120.00", "1 Rice $3.00"], limits=ParserLimits(item=Decimal("100")))

    assert [item.name for item in receipt.items] == ["Rice"]
    assert any("implausible price" in warning.message for warning in receipt.warnings)


def test_total_with_thousands_separator_above_limit_falls_back() -> None:
    receipt = parse_receipt(["Cafe X", "1 Soup $5.00", "1 Bread $2.00", "Subtotal $7.00", "Total $1,234.56"])

    assert receipt.grand_total == Decimal("7.00")
    assert receipt.grand_total_is_derived


def test_comma_separated_items_header_opens_item_section() -> None:
    receipt = parse_receipt(["Cafe X", "ITEM, QTY, PRICE", "1 Soup $5.00", "Total $5.00"])

    assert [(item.name, item.price) for item in receipt.items] == [("Soup", Decimal("5.00"))]
    assert receipt.restaurant_info.address == ()
