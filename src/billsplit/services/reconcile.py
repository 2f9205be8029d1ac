from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Sequence

from billsplit.logging import get_logger
from billsplit.models import PersonTotal, ShareLine
from billsplit.money import Amount, cents_to_decimal, round_money, to_cents, to_fraction
from billsplit.services.allocation import LineAllocation


class ReconciliationError(AssertionError):
    pass


@dataclass(slots=True)
class PersonBreakdown:
    """Raw, unrounded amounts for one person. Discount is stored positive."""

    person_id: str
    name: str
    subtotal: Fraction = Fraction(0)
    discount_share: Fraction = Fraction(0)
    service_fee_share: Fraction = Fraction(0)
    tax_share: Fraction = Fraction(0)
    tip_share: Fraction = Fraction(0)
    lines: list[LineAllocation] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.subtotal = to_fraction(self.subtotal)
        self.discount_share = to_fraction(self.discount_share)
        self.service_fee_share = to_fraction(self.service_fee_share)
        self.tax_share = to_fraction(self.tax_share)
        self.tip_share = to_fraction(self.tip_share)

    @property
    def total(self) -> Fraction:
        return self.subtotal - self.discount_share + self.service_fee_share + self.tax_share + self.tip_share


@dataclass(slots=True)
class _RoundedPerson:
    source: PersonBreakdown
    subtotal: int
    discount_share: int
    service_fee_share: int
    tax_share: int
    tip_share: int
    total: int

    @classmethod
    def from_breakdown(cls, breakdown: PersonBreakdown) -> _RoundedPerson:
        return cls(
            source=breakdown,
            subtotal=to_cents(breakdown.subtotal),
            discount_share=to_cents(breakdown.discount_share),
            service_fee_share=to_cents(breakdown.service_fee_share),
            tax_share=to_cents(breakdown.tax_share),
            tip_share=to_cents(breakdown.tip_share),
            total=to_cents(breakdown.total),
        )

    def to_person_total(self) -> PersonTotal:
        return PersonTotal(
            person_id=self.source.person_id,
            name=self.source.name,
            subtotal=cents_to_decimal(self.subtotal),
            discount_share=cents_to_decimal(self.discount_share),
            service_fee_share=cents_to_decimal(self.service_fee_share),
            tax_share=cents_to_decimal(self.tax_share),
            tip_share=cents_to_decimal(self.tip_share),
            total=cents_to_decimal(self.total),
            items=[_share_line(line) for line in self.source.lines],
        )


def _share_line(line: LineAllocation) -> ShareLine:
    return ShareLine(
        item_id=line.item.id,
        label=line.item.label,
        emoji=line.item.emoji,
        price=round_money(line.item.price),
        quantity=line.item.quantity,
        weight=line.weight,
        share_amount=round_money(line.share_amount),
    )


def rounding_residual_cents(breakdowns: Sequence[PersonBreakdown], target_total: Amount) -> int:
    """Cents between the target and the sum of independently rounded totals."""
    return to_cents(target_total) - sum(to_cents(b.total) for b in breakdowns)


def reconcile_pennies(breakdowns: Sequence[PersonBreakdown], target_total: Amount) -> list[PersonTotal]:
    """
    Round every amount to cents and move the leftover cents onto totals so
    they sum exactly to target_total.

    Cents go to the largest rounded totals first, one per person, wrapping
    around if the residual exceeds the number of people. Only ``total`` is
    adjusted. The result keeps the input order.
    """
    rounded = [_RoundedPerson.from_breakdown(b) for b in breakdowns]
    target_cents = to_cents(target_total)
    remainder = target_cents - sum(person.total for person in rounded)
    if remainder == 0:
        return [person.to_person_total() for person in rounded]

    if not rounded:
        raise ReconciliationError(f"{remainder} cents left over with no people to absorb them")

    log = get_logger(__name__)
    if abs(remainder) > len(rounded):
        log.warning("pennies.residual_exceeds_people", cents=remainder, people=len(rounded))

    # sorted() is stable, so equal totals keep their input order.
    order = sorted(range(len(rounded)), key=lambda i: rounded[i].total, reverse=True)
    step = 1 if remainder > 0 else -1
    rounds, extra = divmod(abs(remainder), len(order))
    for position, idx in enumerate(order):
        rounded[idx].total += step * (rounds + (1 if position < extra else 0))

    log.debug("pennies.reconciled", cents=remainder, people=len(rounded))
    return [person.to_person_total() for person in rounded]
