"""Composable OCR receipt parser components."""

from .common import DEFAULT_LIMITS, ParserLimits, PriceMatch, _extract_price
from .fields_parser import SummaryAmounts, _extract_restaurant_info, _extract_summary
from .items_text_parser import ItemAssembler, _extract_items
from .line_classifier import ClassifiedLine, _classify_lines, _normalize_lines

__all__ = [
    "DEFAULT_LIMITS",
    "ClassifiedLine",
    "ItemAssembler",
    "ParserLimits",
    "PriceMatch",
    "SummaryAmounts",
    "_classify_lines",
    "_extract_items",
    "_extract_price",
    "_extract_restaurant_info",
    "_extract_summary",
    "_normalize_lines",
]
