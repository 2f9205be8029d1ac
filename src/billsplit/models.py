from __future__ import annotations

from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from billsplit.money import to_fraction


class ChargeMode(str, Enum):
    PROPORTIONAL = "proportional"
    EVEN = "even"


Weight = Annotated[
    Fraction,
    BeforeValidator(to_fraction),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class Item(_Frozen):
    """A priced line on the bill. price is the line total, not a unit price."""

    id: str = Field(min_length=1)
    label: str = "Item"
    price: Decimal
    quantity: int = 1
    emoji: Optional[str] = None


class Person(_Frozen):
    id: str = Field(min_length=1)
    name: str
    avatar_url: Optional[str] = None
    venmo_handle: Optional[str] = None
    is_paid: bool = False


class ItemShare(_Frozen):
    """
    Links one item to one person.

    weight is relative: it is normalized against the sum of weights of all
    shares of the same item, so 1/1 and 0.5/0.5 describe the same split.
    """

    item_id: str = Field(min_length=1)
    person_id: str = Field(min_length=1)
    weight: Weight = Fraction(1)


class ShareLine(_Frozen):
    item_id: str
    label: str
    emoji: Optional[str] = None
    price: Decimal
    quantity: int
    weight: Weight
    share_amount: Decimal


class PersonTotal(_Frozen):
    person_id: str
    name: str
    subtotal: Decimal
    discount_share: Decimal
    service_fee_share: Decimal
    tax_share: Decimal
    tip_share: Decimal
    total: Decimal
    items: list[ShareLine] = Field(default_factory=list)


class PennyReconciliation(_Frozen):
    distributed: Decimal
    method: Literal["distribute_largest"] = "distribute_largest"


class BillTotals(_Frozen):
    subtotal: Decimal
    tax: Decimal
    tip: Decimal
    discount: Decimal
    service_fee: Decimal
    grand_total: Decimal
    person_totals: list[PersonTotal]
    penny_reconciliation: PennyReconciliation
