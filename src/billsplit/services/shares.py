from __future__ import annotations

from fractions import Fraction
from typing import Iterable, Mapping, Optional, Sequence, Union

from billsplit.models import Item, ItemShare

ItemRef = Union[str, Mapping[str, object], object]


def _item_ref_id(ref: ItemRef) -> str:
    if isinstance(ref, str):
        return ref
    if isinstance(ref, Mapping):
        return str(ref["id"])
    return str(getattr(ref, "id"))


def build_shares_from_people_items(
    items: Sequence[Item],
    people_items: Mapping[str, Optional[Iterable[ItemRef]]],
) -> list[ItemShare]:
    """
    Derive weighted shares from a person -> item ids map.

    An item held by n people gets weight 1/n for each of them. Unknown item
    ids and repeated references by the same person are ignored.
    """
    known = {item.id for item in items}

    held: list[tuple[str, str]] = []
    holders: dict[str, int] = {}
    for person_id, refs in people_items.items():
        seen: set[str] = set()
        for ref in refs or ():
            item_id = _item_ref_id(ref)
            if item_id not in known or item_id in seen:
                continue
            seen.add(item_id)
            held.append((item_id, person_id))
            holders[item_id] = holders.get(item_id, 0) + 1

    return [
        ItemShare(item_id=item_id, person_id=person_id, weight=Fraction(1, holders[item_id]))
        for item_id, person_id in held
    ]
