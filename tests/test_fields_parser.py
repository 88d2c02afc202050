from decimal import Decimal

from scanpay.domain.parser_rules import ParserLimits
from scanpay.receipt.ocr_parser.fields_parser import (
    _extract_price_from_summary_line,
    _extract_restaurant_info,
    _extract_summary,
)
from scanpay.receipt.ocr_parser.line_classifier import _classify_lines


def test_restaurant_info_collects_address_lines_in_order() -> None:
    info = _extract_restaurant_info(
        _classify_lines(
            [
                "Blue Door Bistro",
                "12 Main Street",
                "Springfield, IL 62701",
                "(217) 555-0142",
                "QTY ITEM",
                "1 Soup 5.00",
            ]
        )
    )

    assert info.name == "Blue Door Bistro"
    assert info.address == ("12 Main Street", "Springfield, IL 62701")
    assert info.phone == "(217) 555-0142"
    assert info.date == ""
    assert info.order_number == ""


def test_restaurant_info_fields_may_be_empty() -> None:
    info = _extract_restaurant_info(_classify_lines(["1 Soup $5.00", "Total $5.00"]))

    assert info.name == ""
    assert info.address == ()


def test_summary_prefers_amount_after_colon() -> None:
    assert _extract_price_from_summary_line("Tax (8.5%): 2.07", Decimal("200")) == Decimal("2.07")
    assert _extract_price_from_summary_line("Total 25.02", Decimal("1000")) == Decimal("25.02")


def test_summary_first_plausible_value_wins() -> None:
    summary = _extract_summary(
        _classify_lines(["Cafe X", "1 Soup $5.00", "Subtotal $5.00", "Tax $0.40", "Total $5.40", "Total $99.99"])
    )

    assert summary.subtotal == Decimal("5.00")
    assert summary.tax == Decimal("0.40")
    assert summary.total == Decimal("5.40")


def test_summary_tax_above_tax_limit_stays_unset() -> None:
    summary = _extract_summary(
        _classify_lines(["Cafe X", "1 Soup $5.00", "Subtotal $5.00", "Total $5.40", "Tax 450.00"]),
        ParserLimits(),
    )

    assert summary.tax is None
    assert summary.total == Decimal("5.40")


def test_restaurant_info_keeps_first_phone_date_and_order_number() -> None:
    info = _extract_restaurant_info(
        _classify_lines(
            [
                "Blue Door Bistro",
                "(415) 555-0100",
                "(415) 555-0199",
                "03/14/2025",
                "03/15/2025",
                "QTY ITEM",
                "1 Soup 5.00",
            ]
        )
    )

    assert info.phone == "(415) 555-0100"
    assert info.date == "03/14/2025"

    info = _extract_restaurant_info(_classify_lines(["Cafe X", "Order # 12", "Order # 13"]))
    assert info.order_number == "Order # 12"


def test_restaurant_info_accepts_digit_run_phone() -> None:
    info = _extract_restaurant_info(_classify_lines(["Cafe X", "4155550100", "QTY ITEM", "1 Soup 5.00"]))

    assert info.phone == "4155550100"
