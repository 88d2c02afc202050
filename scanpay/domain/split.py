"""Pure bill-splitting math."""

from collections.abc import Mapping, Set
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from scanpay.domain.receipt import Receipt, new_id

CENT = Decimal("0.01")

# Display colors handed out round-robin to new people.
PERSON_PALETTE: tuple[str, ...] = (
    "blue",
    "green",
    "orange",
    "purple",
    "pink",
    "teal",
    "red",
    "yellow",
)


@dataclass(frozen=True)
class Person:
    """Someone sharing the bill. ``color`` is opaque to the core."""

    name: str
    color: str
    id: str = field(default_factory=new_id)


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def claimed_subtotal(
    receipt: Receipt,
    assignments: Mapping[str, Set[str]],
    person_id: str,
) -> Decimal:
    """Sum of the person's share of every item they claimed.

    A shared item is split evenly among its assignees, so the claimed
    subtotals of all people never exceed the item sum.
    """
    claimed = Decimal("0")
    for item in receipt.items:
        assignees = assignments.get(item.id)
        if not assignees or person_id not in assignees:
            continue
        claimed += item.price / len(assignees)
    return claimed


def compute_person_total(
    receipt: Receipt,
    assignments: Mapping[str, Set[str]],
    person_id: str,
) -> Decimal:
    """
    Apportion tax/tip proportionally to the person's claimed subtotal.

    result = round(claimed * grand_total / subtotal, 2); a zero subtotal uses
    a ratio of 1.

    Args:
        receipt: Receipt whose items were claimed
        assignments: item id -> ids of the people who claimed it
        person_id: Person to total

    Returns:
        Amount owed, rounded half-up to cents
    """
    claimed = claimed_subtotal(receipt, assignments, person_id)
    if receipt.subtotal == 0:
        return quantize_money(claimed)
    return quantize_money(claimed * receipt.grand_total / receipt.subtotal)
