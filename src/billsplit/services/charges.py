from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Mapping

from billsplit.models import ChargeMode


@dataclass(slots=True)
class Charges:
    tax: Fraction = Fraction(0)
    tip: Fraction = Fraction(0)
    discount: Fraction = Fraction(0)
    service_fee: Fraction = Fraction(0)


@dataclass(slots=True)
class ChargeShares:
    tax_share: Fraction = Fraction(0)
    tip_share: Fraction = Fraction(0)
    discount_share: Fraction = Fraction(0)
    service_fee_share: Fraction = Fraction(0)


def split_charge(
    amount: Fraction,
    subtotals: Mapping[str, Fraction],
    mode: ChargeMode,
    include_zero_item_people: bool = True,
) -> dict[str, Fraction]:
    """
    Split one charge across people.

    Proportional mode weighs by subtotal; even mode splits equally among
    everyone, or only among people with a positive subtotal when
    include_zero_item_people is False. A zero overall subtotal or an empty
    set of recipients leaves everyone at zero.
    """
    shares = {person_id: Fraction(0) for person_id in subtotals}
    if amount == 0:
        return shares

    if ChargeMode(mode) is ChargeMode.PROPORTIONAL:
        overall = sum(subtotals.values(), Fraction(0))
        if overall == 0:
            return shares
        for person_id, subtotal in subtotals.items():
            shares[person_id] = amount * subtotal / overall
        return shares

    recipients = [
        person_id
        for person_id, subtotal in subtotals.items()
        if include_zero_item_people or subtotal > 0
    ]
    if not recipients:
        return shares
    each = amount / len(recipients)
    for person_id in recipients:
        shares[person_id] = each
    return shares


def distribute_charges(
    subtotals: Mapping[str, Fraction],
    charges: Charges,
    tax_mode: ChargeMode = ChargeMode.PROPORTIONAL,
    tip_mode: ChargeMode = ChargeMode.PROPORTIONAL,
    include_zero_item_people: bool = True,
) -> dict[str, ChargeShares]:
    # Discount and service fee have no even mode.
    tax = split_charge(charges.tax, subtotals, tax_mode, include_zero_item_people)
    tip = split_charge(charges.tip, subtotals, tip_mode, include_zero_item_people)
    discount = split_charge(charges.discount, subtotals, ChargeMode.PROPORTIONAL)
    service_fee = split_charge(charges.service_fee, subtotals, ChargeMode.PROPORTIONAL)

    return {
        person_id: ChargeShares(
            tax_share=tax[person_id],
            tip_share=tip[person_id],
            discount_share=discount[person_id],
            service_fee_share=service_fee[person_id],
        )
        for person_id in subtotals
    }
