"""Bill-splitting allocator: people, item claims and per-person totals."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from decimal import Decimal

from scanpay.domain.receipt import Receipt, ReceiptItem
from scanpay.domain.split import PERSON_PALETTE, Person, compute_person_total
from scanpay.runtime import get_logger

logger = get_logger(__name__)


class UnknownPersonError(LookupError):
    """Raised when a command names a person the splitter does not know."""


class BillSplitter:
    """
    Serialized state machine over ``people`` and the current ``receipt``.

    The claim relation is stored once, keyed by item id; per-person views are
    computed on demand. Every command runs under one lock, so concurrent
    callers always observe a consistent state.

    At least one person exists at all times.
    """

    def __init__(self, receipt: Receipt | None = None, palette: Sequence[str] = PERSON_PALETTE) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self._lock = threading.RLock()
        self._palette = tuple(palette)
        self._colors_handed_out = 0
        self._people: list[Person] = []
        self._receipt = receipt
        self._assignments: dict[str, set[str]] = {}
        self.add_person()

    # --- Read views ---
    @property
    def people(self) -> tuple[Person, ...]:
        with self._lock:
            return tuple(self._people)

    @property
    def receipt(self) -> Receipt | None:
        with self._lock:
            return self._receipt

    def get_person(self, person_id: str) -> Person:
        with self._lock:
            return self._require_person(person_id)

    def assignees(self, item_id: str) -> frozenset[str]:
        """Ids of the people who claimed an item (empty for unknown items)."""
        with self._lock:
            return frozenset(self._assignments.get(item_id, ()))

    def items_for(self, person_id: str) -> tuple[ReceiptItem, ...]:
        """Items the person claimed, in receipt order."""
        with self._lock:
            self._require_person(person_id)
            if self._receipt is None:
                return ()
            return tuple(item for item in self._receipt.items if person_id in self._assignments.get(item.id, ()))

    def unassigned_items(self) -> tuple[ReceiptItem, ...]:
        with self._lock:
            if self._receipt is None:
                return ()
            return tuple(item for item in self._receipt.items if not self._assignments.get(item.id))

    # --- Commands ---
    def add_person(self, name: str | None = None) -> Person:
        """Append a person; colors cycle through the palette."""
        with self._lock:
            color = self._palette[self._colors_handed_out % len(self._palette)]
            self._colors_handed_out += 1
            person = Person(name=name or f"Person {len(self._people) + 1}", color=color)
            self._people.append(person)
            logger.debug("Added %s (%s)", person.name, person.id)
            return person

    def remove_person(self, person_id: str) -> bool:
        """
        Remove a person and every claim they made.

        Returns:
            False (and changes nothing) when only one person is left or the
            id is unknown.
        """
        with self._lock:
            if len(self._people) <= 1:
                logger.debug("Refusing to remove the last person")
                return False
            remaining = [p for p in self._people if p.id != person_id]
            if len(remaining) == len(self._people):
                return False
            self._people = remaining
            for assignees in self._assignments.values():
                assignees.discard(person_id)
            self._assignments = {item_id: ids for item_id, ids in self._assignments.items() if ids}
            return True

    def rename_person(self, person_id: str, name: str) -> Person:
        with self._lock:
            if not name or not name.strip():
                raise ValueError("name must not be blank")
            person = self._require_person(person_id)
            renamed = Person(name=name.strip(), color=person.color, id=person.id)
            self._people = [renamed if p.id == person_id else p for p in self._people]
            return renamed

    def toggle_assignment(self, item_id: str, person_id: str) -> bool:
        """
        Flip whether a person claims an item.

        Unknown item ids are a no-op. Calling twice restores the original
        relation.

        Returns:
            True if the person now claims the item.
        """
        with self._lock:
            self._require_person(person_id)
            if self._receipt is None or self._receipt.find_item(item_id) is None:
                logger.debug("Ignoring toggle for unknown item %s", item_id)
                return False
            assignees = self._assignments.setdefault(item_id, set())
            if person_id in assignees:
                assignees.discard(person_id)
                if not assignees:
                    del self._assignments[item_id]
                return False
            assignees.add(person_id)
            return True

    def replace_receipt(self, receipt: Receipt | None) -> None:
        """Swap in a new scan. People persist; every claim is dropped."""
        with self._lock:
            self._receipt = receipt
            self._assignments = {}

    # --- Totals ---
    def person_total(self, person_id: str) -> Decimal:
        with self._lock:
            self._require_person(person_id)
            if self._receipt is None:
                return Decimal("0.00")
            return compute_person_total(self._receipt, self._assignments, person_id)

    def grand_total(self) -> Decimal:
        with self._lock:
            if self._receipt is None:
                return Decimal("0.00")
            return self._receipt.grand_total

    def totals(self) -> dict[str, Decimal]:
        """person id -> amount owed, in people order."""
        with self._lock:
            return {person.id: self.person_total(person.id) for person in self._people}

    def _require_person(self, person_id: str) -> Person:
        for person in self._people:
            if person.id == person_id:
                return person
        raise UnknownPersonError(person_id)
