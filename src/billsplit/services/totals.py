from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Iterable, Mapping, Optional, Sequence, Union

from billsplit.logging import get_logger
from billsplit.models import BillTotals, ChargeMode, Item, ItemShare, PennyReconciliation, Person, PersonTotal
from billsplit.money import Amount, cents_to_decimal, is_whole_cents, round_money, to_cents, to_fraction
from billsplit.services.allocation import allocate_items
from billsplit.services.charges import Charges, distribute_charges
from billsplit.services.reconcile import (
    PersonBreakdown,
    ReconciliationError,
    reconcile_pennies,
    rounding_residual_cents,
)
from billsplit.services.shares import build_shares_from_people_items
from billsplit.services.weights import NoPeopleError, validate_share_weights

_BILL_MONEY_FIELDS = ("subtotal", "tax", "tip", "discount", "service_fee", "grand_total")
_MONEY_FIELDS = ("subtotal", "discount_share", "service_fee_share", "tax_share", "tip_share", "total")


@dataclass(slots=True)
class TotalsCheck:
    valid: bool
    error: Optional[str] = None


def compute_totals(
    items: Sequence[Item],
    shares: Sequence[ItemShare],
    people: Sequence[Person],
    tax: Amount = 0,
    tip: Amount = 0,
    discount: Amount = 0,
    service_fee: Amount = 0,
    tax_mode: ChargeMode | str = ChargeMode.PROPORTIONAL,
    tip_mode: ChargeMode | str = ChargeMode.PROPORTIONAL,
    include_zero_item_people: bool = True,
    *,
    max_weight: Amount | None = None,
) -> BillTotals:
    """
    Split a bill into per-person totals that add up to the grand total to
    the cent.

    Raises ShareValidationError for malformed shares or a non-zero bill with
    nobody on it, and ReconciliationError if the result does not balance.
    """
    log = get_logger(__name__)
    validate_share_weights(shares, max_weight=max_weight)

    charges = Charges(
        tax=to_fraction(tax),
        tip=to_fraction(tip),
        discount=to_fraction(discount),
        service_fee=to_fraction(service_fee),
    )
    subtotal = sum((to_fraction(item.price) for item in items), Fraction(0))
    grand_total = subtotal - charges.discount + charges.service_fee + charges.tax + charges.tip
    target = cents_to_decimal(to_cents(grand_total))
    if not people and target != 0:
        raise NoPeopleError(target)

    allocation = allocate_items(items, shares, people)
    charge_shares = distribute_charges(
        allocation.subtotals,
        charges,
        tax_mode=ChargeMode(tax_mode),
        tip_mode=ChargeMode(tip_mode),
        include_zero_item_people=include_zero_item_people,
    )

    breakdowns = [
        PersonBreakdown(
            person_id=person.id,
            name=person.name,
            subtotal=allocation.subtotals[person.id],
            discount_share=charge_shares[person.id].discount_share,
            service_fee_share=charge_shares[person.id].service_fee_share,
            tax_share=charge_shares[person.id].tax_share,
            tip_share=charge_shares[person.id].tip_share,
            lines=allocation.lines[person.id],
        )
        for person in people
    ]

    distributed = rounding_residual_cents(breakdowns, target)
    person_totals = reconcile_pennies(breakdowns, target)

    totals = BillTotals(
        subtotal=round_money(subtotal),
        tax=round_money(charges.tax),
        tip=round_money(charges.tip),
        discount=round_money(charges.discount),
        service_fee=round_money(charges.service_fee),
        grand_total=target,
        person_totals=person_totals,
        penny_reconciliation=PennyReconciliation(distributed=cents_to_decimal(distributed)),
    )
    assert_bill_totals(totals)

    log.debug(
        "totals.computed",
        items=len(items),
        people=len(people),
        shares=len(shares),
        grand_total=str(target),
        distributed_cents=distributed,
    )
    return totals


RawRecord = Union[Mapping[str, object], Item, Person]


def _field(record: RawRecord, name: str, default: object = None) -> object:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _to_item(record: RawRecord) -> Item:
    if isinstance(record, Item):
        return record
    return Item(
        id=_field(record, "id"),
        label=_field(record, "label") or _field(record, "name") or "Item",
        price=_field(record, "price"),
        emoji=_field(record, "emoji"),
    )


def compute_totals_from_people_items(
    items: Iterable[RawRecord],
    people: Iterable[RawRecord],
    tax: Amount = 0,
    tip: Amount = 0,
    discount: Amount = 0,
    service_fee: Amount = 0,
    tax_mode: ChargeMode | str = ChargeMode.PROPORTIONAL,
    tip_mode: ChargeMode | str = ChargeMode.PROPORTIONAL,
    include_zero_item_people: bool = True,
) -> Optional[BillTotals]:
    """
    One-call entry for assignment screens, where each person carries the list
    of item ids they took. Items may use ``name`` instead of ``label``.

    Returns None when there are no items yet.
    """
    bill_items = [_to_item(record) for record in items]
    if not bill_items:
        return None

    people = list(people)
    bill_people = [
        Person(id=_field(record, "id"), name=_field(record, "name") or "")
        for record in people
    ]
    shares = build_shares_from_people_items(
        bill_items,
        {person.id: _field(record, "items") for person, record in zip(bill_people, people)},
    )
    return compute_totals(
        bill_items,
        shares,
        bill_people,
        tax,
        tip,
        discount,
        service_fee,
        tax_mode,
        tip_mode,
        include_zero_item_people,
    )


def validate_bill_totals(totals: BillTotals) -> TotalsCheck:
    for name in _BILL_MONEY_FIELDS:
        value = getattr(totals, name)
        if not is_whole_cents(value):
            return TotalsCheck(False, f"{name} is not whole cents: {value}")

    for person in totals.person_totals:
        for name in _MONEY_FIELDS:
            value = getattr(person, name)
            if not is_whole_cents(value):
                return TotalsCheck(False, f"{name} of person {person.person_id} is not whole cents: {value}")
        for line in person.items:
            if not (is_whole_cents(line.share_amount) and is_whole_cents(line.price)):
                return TotalsCheck(
                    False,
                    f"share of item {line.item_id} for person {person.person_id} is not whole cents",
                )

    summed = sum((person.total for person in totals.person_totals), Decimal("0"))
    if summed != totals.grand_total:
        return TotalsCheck(False, f"Person totals ({summed}) don't match grand total ({totals.grand_total})")
    return TotalsCheck(True)


def assert_bill_totals(totals: BillTotals) -> None:
    check = validate_bill_totals(totals)
    if not check.valid:
        get_logger(__name__).error("totals.unbalanced", error=check.error)
        raise ReconciliationError(check.error)


def get_person_breakdown(totals: Optional[BillTotals], person_id: str) -> Optional[PersonTotal]:
    if totals is None:
        return None
    for person in totals.person_totals:
        if person.person_id == person_id:
            return person
    return None


def get_person_total(totals: Optional[BillTotals], person_id: str) -> Decimal:
    person = get_person_breakdown(totals, person_id)
    if person is None:
        return Decimal("0.00")
    return person.total
