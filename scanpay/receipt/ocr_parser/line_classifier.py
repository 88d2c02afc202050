"""Single-pass line classifier with a small section state machine."""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from scanpay.domain.receipt import LineRole, RawLine, Section
from scanpay.runtime import get_logger

from .common import (
    METADATA_WINDOW,
    REGION_CODE_PATTERN,
    STREET_TYPE_PATTERN,
    SUMMARY_HEADER_PATTERN,
    YEAR_FRAGMENT_PATTERN,
    _is_items_header,
    _is_modifier_text,
    _looks_like_summary_line,
    _looks_money_like,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClassifiedLine:
    """A raw line tagged with its role and the section it was seen in."""

    line: RawLine
    role: LineRole
    section: Section

    @property
    def text(self) -> str:
        return self.line.text


def _is_restaurant_name(text: str) -> bool:
    """First line of the scan, unless it is a 'receipt' banner, a column header or a priced row."""
    if not text.strip() or _is_items_header(text):
        return False
    if "receipt" in text.lower():
        return False
    return not _looks_money_like(text)


def _is_order_number(text: str) -> bool:
    return "order" in text.lower() and "#" in text


def _is_date(text: str) -> bool:
    return "/" in text and YEAR_FRAGMENT_PATTERN.search(text) is not None


def _is_phone(text: str) -> bool:
    if "(" in text and ")" in text and "-" in text:
        return True
    stripped = text.strip()
    digits = sum(1 for c in stripped if c.isdigit())
    return 10 <= len(stripped) <= 14 and digits >= 10


def _is_address(text: str) -> bool:
    return "," in text or REGION_CODE_PATTERN.search(text) is not None or STREET_TYPE_PATTERN.search(text) is not None


# Most specific first: a dated line often also has a comma.
_METADATA_TESTS = (
    (LineRole.ORDER_NUMBER, _is_order_number),
    (LineRole.DATE, _is_date),
    (LineRole.PHONE, _is_phone),
    (LineRole.ADDRESS_LINE, _is_address),
)


def _metadata_role(line: RawLine) -> LineRole | None:
    """Position-based metadata role, independent of section state."""
    if line.index == 0:
        return LineRole.RESTAURANT_NAME if _is_restaurant_name(line.text) else None
    if line.index not in METADATA_WINDOW:
        return None
    # Priced rows, "*" modifier rows and column headers are never metadata.
    if _looks_money_like(line.text) or _is_modifier_text(line.text) or _is_items_header(line.text):
        return None
    for role, test in _METADATA_TESTS:
        if test(line.text):
            return role
    return None


def _summary_role(text: str) -> LineRole:
    """Pick the summary field a line reports: subtotal beats tax beats total."""
    lower = text.lower()
    if "subtotal" in lower:
        return LineRole.SUBTOTAL_LINE
    if "tax" in lower:
        return LineRole.TAX_LINE
    if "total" in lower:
        return LineRole.TOTAL_LINE
    return LineRole.UNCLASSIFIED


def _section_role(text: str, section: Section) -> LineRole:
    if section is Section.ITEMS:
        return LineRole.MODIFIER_CANDIDATE if _is_modifier_text(text) else LineRole.ITEM_CANDIDATE
    if section is Section.SUMMARY:
        return _summary_role(text)
    return LineRole.UNCLASSIFIED


def _initial_section(lines: Sequence[RawLine]) -> Section:
    """Receipts without a column header start in the item section."""
    if any(_is_items_header(line.text) for line in lines):
        return Section.NONE
    return Section.ITEMS


def _classify_lines(texts: Sequence[str]) -> list[ClassifiedLine]:
    """
    Assign every line exactly one LineRole.

    Transition rules, first match wins:
    1. An items header (DESCRIPTION / QTY / ITEM) enters the item section.
    2. A SUBTOTAL / TAX / TOTAL line enters the summary section, even from
       inside the item section.
    3. Anything else is classified by the current section.

    The first line and lines 1-4 are tested for metadata before any of this,
    and a metadata role wins over section-based roles.

    Args:
        texts: OCR lines in reading order

    Returns:
        One ClassifiedLine per input line, same order
    """
    lines = [RawLine(index=i, text=text) for i, text in enumerate(texts)]
    section = _initial_section(lines)
    classified: list[ClassifiedLine] = []

    for line in lines:
        text = line.text
        metadata_role = _metadata_role(line)
        if metadata_role is not None:
            classified.append(ClassifiedLine(line=line, role=metadata_role, section=section))
            continue

        if _is_items_header(text):
            section = Section.ITEMS
            classified.append(ClassifiedLine(line=line, role=LineRole.ITEMS_HEADER, section=section))
            continue

        if SUMMARY_HEADER_PATTERN.match(text):
            section = Section.SUMMARY
            classified.append(ClassifiedLine(line=line, role=LineRole.SUMMARY_HEADER, section=section))
            continue

        if _looks_like_summary_line(text):
            section = Section.SUMMARY

        role = _section_role(text, section)
        classified.append(ClassifiedLine(line=line, role=role, section=section))

    logger.debug(
        "Classified %d lines: %s",
        len(classified),
        ", ".join(f"{c.line.index}={c.role.value}" for c in classified),
    )
    return classified


def _roles(texts: Sequence[str]) -> list[LineRole]:
    """Convenience view used by tests and debugging output."""
    return [c.role for c in _classify_lines(texts)]


def _normalize_lines(texts: Sequence[str]) -> list[str]:
    """Drop blank lines and surrounding whitespace from raw OCR output."""
    return [re.sub(r"[ \t]+", " ", text).strip() for text in texts if text and text.strip()]
