"""Vendor-specific re-parse for restaurants with a known receipt layout."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any

from scanpay.domain.parser_rules import ParserLimits, VendorTemplate
from scanpay.domain.receipt import LineRole, ReceiptItem, RestaurantInfo
from scanpay.runtime import get_logger

from .ocr_parser.common import DEFAULT_LIMITS, _clean_modifier, _is_modifier_text, _looks_like_summary_line
from .ocr_parser.fields_parser import SummaryAmounts, _extract_price_from_summary_line
from .ocr_parser.items_text_parser import ItemAssembler, _feed_item_line
from .ocr_parser.line_classifier import _summary_role

logger = get_logger(__name__)


@dataclass(frozen=True)
class TemplateExtraction:
    """Fields a vendor routine managed to read. Empty values mean 'not found'."""

    template: VendorTemplate
    restaurant_info: RestaurantInfo
    items: tuple[ReceiptItem, ...]
    summary: SummaryAmounts


def build_vendor_templates(configs: Iterable[dict[str, Any]]) -> tuple[VendorTemplate, ...]:
    """Build templates from parsed TOML documents (``[[templates]]`` tables)."""
    templates: list[VendorTemplate] = []
    for config in configs:
        for entry in config.get("templates", []):
            name = str(entry.get("name", "")).strip()
            keywords = tuple(str(kw).upper() for kw in entry.get("keywords", []) if str(kw).strip())
            if not name or not keywords:
                raise ValueError(f"vendor template needs a name and keywords: {entry!r}")
            templates.append(
                VendorTemplate(
                    name=name,
                    keywords=keywords,
                    address=tuple(str(a) for a in entry.get("address", [])),
                    phone=str(entry.get("phone", "")),
                    items_header=str(entry.get("items_header", "")),
                )
            )
    return tuple(templates)


def match_vendor_template(
    restaurant_name: str,
    templates: Sequence[VendorTemplate],
) -> VendorTemplate | None:
    """Return the first template whose name fragment appears in the name."""
    if not restaurant_name:
        return None
    for template in templates:
        if template.matches(restaurant_name):
            return template
    return None


def _extract_with_template(
    template: VendorTemplate,
    lines: Sequence[str],
    limits: ParserLimits = DEFAULT_LIMITS,
) -> TemplateExtraction:
    """
    Re-read the raw lines with the template's narrower rules.

    Address and phone come from exact substrings. Items are only read after
    the template's own header line and stop at the first summary line; if
    the header never appears, no items are reported.
    """
    address = tuple(line for line in lines if any(marker in line for marker in template.address))
    phone = ""
    if template.phone:
        phone = next((line for line in lines if template.phone in line), "")

    assembler = ItemAssembler()
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None
    in_items = False
    in_summary = False
    for line in lines:
        if template.items_header and template.items_header in line:
            in_items = True
            in_summary = False
            continue
        if _looks_like_summary_line(line):
            if in_items:
                assembler.section_ended()
            in_items = False
            in_summary = True
        if in_items:
            if _is_modifier_text(line):
                assembler.modifier_line_seen(_clean_modifier(line))
            else:
                _feed_item_line(assembler, line, limits.item)
        elif in_summary:
            role = _summary_role(line)
            if role is LineRole.SUBTOTAL_LINE and subtotal is None:
                subtotal = _extract_price_from_summary_line(line, limits.summary)
            elif role is LineRole.TAX_LINE and tax is None:
                tax = _extract_price_from_summary_line(line, limits.tax)
            elif role is LineRole.TOTAL_LINE and total is None:
                total = _extract_price_from_summary_line(line, limits.summary)

    return TemplateExtraction(
        template=template,
        restaurant_info=RestaurantInfo(name=template.name, address=address, phone=phone),
        items=tuple(assembler.end_of_input()),
        summary=SummaryAmounts(subtotal=subtotal, tax=tax, total=total),
    )


def _prefer_amount(vendor_value: Decimal | None, generic_value: Decimal | None) -> Decimal | None:
    if vendor_value is not None and vendor_value != 0:
        return vendor_value
    return generic_value


def apply_vendor_override(
    info: RestaurantInfo,
    items: tuple[ReceiptItem, ...],
    summary: SummaryAmounts,
    lines: Sequence[str],
    templates: Sequence[VendorTemplate],
    limits: ParserLimits = DEFAULT_LIMITS,
) -> tuple[RestaurantInfo, tuple[ReceiptItem, ...], SummaryAmounts, VendorTemplate | None]:
    """
    Let a matching vendor template overwrite generic results field by field.

    A field is only overwritten when the vendor routine produced a non-empty,
    non-zero value. A vendor parse that finds nothing simply leaves the
    generic result in place.

    Returns:
        (restaurant_info, items, summary, matched_template_or_None)
    """
    template = match_vendor_template(info.name, templates)
    if template is None:
        return info, items, summary, None

    vendor = _extract_with_template(template, lines, limits)
    logger.debug(
        "Vendor template %r matched %r: %d items, address=%d, phone=%r",
        template.name,
        info.name,
        len(vendor.items),
        len(vendor.restaurant_info.address),
        vendor.restaurant_info.phone,
    )

    merged_info = replace(
        info,
        name=vendor.restaurant_info.name or info.name,
        address=vendor.restaurant_info.address or info.address,
        phone=vendor.restaurant_info.phone or info.phone,
    )
    merged_items = vendor.items or items
    merged_summary = SummaryAmounts(
        subtotal=_prefer_amount(vendor.summary.subtotal, summary.subtotal),
        tax=_prefer_amount(vendor.summary.tax, summary.tax),
        total=_prefer_amount(vendor.summary.total, summary.total),
    )
    return merged_info, merged_items, merged_summary, template
