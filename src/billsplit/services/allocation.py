from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Sequence

from billsplit.models import Item, ItemShare, Person
from billsplit.money import to_fraction
from billsplit.services.weights import OrphanedItemError, UnknownReferenceError, item_total_weights


@dataclass(slots=True)
class LineAllocation:
    item: Item
    weight: Fraction
    share_amount: Fraction


@dataclass(slots=True)
class Allocation:
    """
    Unrounded item allocation.

    subtotals has one entry per person, in the order people were given;
    people without shares map to zero.
    """

    subtotals: dict[str, Fraction]
    lines: dict[str, list[LineAllocation]] = field(default_factory=dict)

    @property
    def allocated_total(self) -> Fraction:
        return sum(self.subtotals.values(), Fraction(0))


def _index_unique(kind: str, ids: Sequence[str]) -> set[str]:
    seen: set[str] = set()
    for entity_id in ids:
        if entity_id in seen:
            raise UnknownReferenceError(f"{kind} id {entity_id} is not unique")
        seen.add(entity_id)
    return seen


def allocate_items(
    items: Sequence[Item],
    shares: Sequence[ItemShare],
    people: Sequence[Person],
) -> Allocation:
    items_by_id = {item.id: item for item in items}
    _index_unique("item", [item.id for item in items])
    person_ids = _index_unique("person", [person.id for person in people])

    for share in shares:
        if share.item_id not in items_by_id:
            raise UnknownReferenceError(f"share references unknown item id: {share.item_id}")
        if share.person_id not in person_ids:
            raise UnknownReferenceError(f"share references unknown person id: {share.person_id}")

    total_weights = item_total_weights(shares)
    orphaned = [item_id for item_id, total in total_weights.items() if total <= 0]
    if orphaned:
        raise OrphanedItemError(orphaned)

    allocation = Allocation(
        subtotals={person.id: Fraction(0) for person in people},
        lines={person.id: [] for person in people},
    )
    for share in shares:
        item = items_by_id[share.item_id]
        amount = to_fraction(item.price) * share.weight / total_weights[share.item_id]
        allocation.lines[share.person_id].append(
            LineAllocation(item=item, weight=share.weight, share_amount=amount)
        )
        allocation.subtotals[share.person_id] += amount

    return allocation
