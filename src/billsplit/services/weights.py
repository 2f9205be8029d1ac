from __future__ import annotations

from fractions import Fraction
from typing import Iterable, Optional, Sequence

from billsplit.config import get_settings
from billsplit.logging import get_logger
from billsplit.models import ItemShare
from billsplit.money import Amount, to_fraction


class ShareValidationError(ValueError):
    pass


class InvalidWeightError(ShareValidationError):
    def __init__(self, item_id: str, person_id: str, weight: Fraction, reason: str) -> None:
        self.item_id = item_id
        self.person_id = person_id
        self.weight = weight
        super().__init__(f"Share of item {item_id} for person {person_id} has invalid weight {weight}: {reason}")


class OrphanedItemError(ShareValidationError):
    def __init__(self, item_ids: Sequence[str]) -> None:
        self.item_ids = tuple(item_ids)
        self.item_id = self.item_ids[0]
        listed = ", ".join(self.item_ids)
        super().__init__(f"Item {listed} would have zero total weight")


class UnknownReferenceError(ShareValidationError):
    pass


class NoPeopleError(ShareValidationError):
    def __init__(self, grand_total: Amount) -> None:
        self.grand_total = grand_total
        super().__init__(f"Bill totals {grand_total} but has no people to split it between")


def group_shares_by_item(shares: Iterable[ItemShare]) -> dict[str, list[ItemShare]]:
    grouped: dict[str, list[ItemShare]] = {}
    for share in shares:
        grouped.setdefault(share.item_id, []).append(share)
    return grouped


def find_existing_share(shares: Iterable[ItemShare], item_id: str, person_id: str) -> Optional[ItemShare]:
    for share in shares:
        if share.item_id == item_id and share.person_id == person_id:
            return share
    return None


def merge_share(shares: Sequence[ItemShare], new_share: ItemShare) -> list[ItemShare]:
    """Replace the share for the same (item, person) pair, or append it."""
    merged: list[ItemShare] = []
    replaced = False
    for share in shares:
        if share.item_id == new_share.item_id and share.person_id == new_share.person_id:
            if not replaced:
                merged.append(new_share)
                replaced = True
            continue
        merged.append(share)
    if not replaced:
        merged.append(new_share)
    return merged


def item_total_weights(shares: Iterable[ItemShare]) -> dict[str, Fraction]:
    totals: dict[str, Fraction] = {}
    for share in shares:
        totals[share.item_id] = totals.get(share.item_id, Fraction(0)) + share.weight
    return totals


def _max_weight(max_weight: Amount | None) -> Fraction:
    if max_weight is None:
        return to_fraction(get_settings().max_share_weight)
    return to_fraction(max_weight)


def validate_share_weights(
    shares: Sequence[ItemShare],
    new_share: ItemShare | None = None,
    *,
    max_weight: Amount | None = None,
) -> None:
    candidate = merge_share(shares, new_share) if new_share is not None else list(shares)
    _validate(candidate, _max_weight(max_weight))


def validate_weight_updates(
    shares: Sequence[ItemShare],
    updates: Iterable[ItemShare],
    *,
    max_weight: Amount | None = None,
) -> list[ItemShare]:
    """
    Apply pending weight updates on top of the current shares and validate
    the merged result. Returns the merged list so callers can persist it.

    Every item left without positive total weight is reported in a single
    OrphanedItemError.
    """
    merged = list(shares)
    for update in updates:
        merged = merge_share(merged, update)
    _validate(merged, _max_weight(max_weight))
    return merged


def _validate(shares: Sequence[ItemShare], limit: Fraction) -> None:
    log = get_logger(__name__)
    for share in shares:
        if share.weight <= 0:
            log.info("shares.rejected", item_id=share.item_id, person_id=share.person_id, reason="non_positive")
            raise InvalidWeightError(share.item_id, share.person_id, share.weight, "must be greater than 0")
        if share.weight > limit:
            log.info("shares.rejected", item_id=share.item_id, person_id=share.person_id, reason="too_large")
            raise InvalidWeightError(share.item_id, share.person_id, share.weight, f"cannot exceed {limit}")

    orphaned = [item_id for item_id, total in item_total_weights(shares).items() if total <= 0]
    if orphaned:
        log.info("shares.rejected", item_ids=orphaned, reason="orphaned")
        raise OrphanedItemError(orphaned)
