"""Text-line based receipt item extraction."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

from scanpay.domain.receipt import LineRole, ReceiptItem, ReceiptWarning
from scanpay.runtime import get_logger

from .common import ITEM_PRICE_LIMIT, _clean_item_name, _clean_modifier, _extract_price
from .line_classifier import ClassifiedLine

logger = get_logger(__name__)

UNBOUNDED = Decimal("Infinity")

BuilderState = Literal["idle", "building"]


@dataclass
class _PendingItem:
    name: str
    price: Decimal
    quantity: int = 1
    modifiers: list[str] = field(default_factory=list)

    def materialize(self) -> ReceiptItem:
        return ReceiptItem(
            name=self.name,
            price=self.price,
            modifiers=tuple(self.modifiers),
            quantity=self.quantity,
        )


class ItemAssembler:
    """
    Two-state machine that turns item/modifier lines into ReceiptItems.

    States are ``idle`` (nothing pending) and ``building`` (an item is
    waiting for modifiers). An item is only emitted when the next item line
    starts or the input ends, so ``*`` lines that follow it attach first.
    """

    def __init__(self, warning_sink: list[ReceiptWarning] | None = None) -> None:
        self.items: list[ReceiptItem] = []
        self._pending: _PendingItem | None = None
        self._warning_sink = warning_sink

    @property
    def state(self) -> BuilderState:
        return "idle" if self._pending is None else "building"

    def item_line_seen(self, name: str, price: Decimal, quantity: int = 1) -> None:
        self._flush()
        self._pending = _PendingItem(name=name, price=price, quantity=quantity)

    def modifier_line_seen(self, text: str) -> None:
        if not text:
            return
        if self._pending is None:
            logger.debug("Discarding orphan modifier %r", text)
            if self._warning_sink is not None:
                self._warning_sink.append(
                    ReceiptWarning(
                        message=f'orphan modifier "{text}" discarded (no item above it)',
                        after_item_index=(len(self.items) - 1) if self.items else None,
                    )
                )
            return
        self._pending.modifiers.append(text)

    def section_ended(self) -> None:
        self._flush()

    def end_of_input(self) -> list[ReceiptItem]:
        self._flush()
        return self.items

    def _flush(self) -> None:
        if self._pending is not None:
            self.items.append(self._pending.materialize())
            self._pending = None


def _feed_item_line(
    assembler: ItemAssembler,
    text: str,
    max_price: Decimal,
    warning_sink: list[ReceiptWarning] | None = None,
) -> bool:
    """Lex one item row and hand it to the assembler. Returns False if skipped."""
    price = _extract_price(text, max_price)
    if price is None:
        implausible = _extract_price(text, UNBOUNDED)
        if implausible is not None and warning_sink is not None:
            warning_sink.append(
                ReceiptWarning(
                    message=f'skipped item line with implausible price {implausible.value} (context: "{text[:80]}")',
                    after_item_index=(len(assembler.items) - 1) if assembler.items else None,
                )
            )
        logger.debug("Skipping item line without a usable price: %r", text)
        return False
    quantity, name = _clean_item_name(text, price)
    if not name:
        logger.debug("Skipping item line with empty name: %r", text)
        return False
    assembler.item_line_seen(name, price.value, quantity)
    return True


def _extract_items(
    classified: Iterable[ClassifiedLine],
    max_price: Decimal = ITEM_PRICE_LIMIT,
    warning_sink: list[ReceiptWarning] | None = None,
) -> list[ReceiptItem]:
    """
    Extract line items from classified receipt lines.

    Only ItemCandidate/ModifierCandidate lines are considered. Leaving the
    item section also flushes the pending item, so a modifier printed after a
    later items header cannot reach back across the summary block.

    Args:
        classified: Output of the line classifier
        max_price: Reasonableness bound for item prices
        warning_sink: Optional list collecting parser warnings

    Returns:
        Items in receipt print order
    """
    assembler = ItemAssembler(warning_sink=warning_sink)
    in_items = False
    for line in classified:
        if line.role is LineRole.ITEM_CANDIDATE:
            in_items = True
            _feed_item_line(assembler, line.text, max_price, warning_sink)
        elif line.role is LineRole.MODIFIER_CANDIDATE:
            in_items = True
            assembler.modifier_line_seen(_clean_modifier(line.text))
        elif in_items and not line.role.is_metadata:
            # Summary or a new header: the pending item is complete.
            assembler.section_ended()
            in_items = False
    # Duplicates are kept: two identical rows are two separate orders.
    return assembler.end_of_input()
