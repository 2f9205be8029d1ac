"""Bill splitting engine: weighted item allocation and penny-exact totals."""

from billsplit.models import (
    BillTotals,
    ChargeMode,
    Item,
    ItemShare,
    PennyReconciliation,
    Person,
    PersonTotal,
    ShareLine,
)
from billsplit.services.reconcile import ReconciliationError, reconcile_pennies
from billsplit.services.shares import build_shares_from_people_items
from billsplit.services.totals import (
    TotalsCheck,
    assert_bill_totals,
    compute_totals,
    compute_totals_from_people_items,
    get_person_breakdown,
    get_person_total,
    validate_bill_totals,
)
from billsplit.services.weights import (
    InvalidWeightError,
    NoPeopleError,
    OrphanedItemError,
    ShareValidationError,
    UnknownReferenceError,
    find_existing_share,
    validate_share_weights,
    validate_weight_updates,
)

__all__ = [
    "BillTotals",
    "ChargeMode",
    "InvalidWeightError",
    "Item",
    "ItemShare",
    "NoPeopleError",
    "OrphanedItemError",
    "PennyReconciliation",
    "Person",
    "PersonTotal",
    "ReconciliationError",
    "ShareLine",
    "ShareValidationError",
    "TotalsCheck",
    "UnknownReferenceError",
    "assert_bill_totals",
    "build_shares_from_people_items",
    "compute_totals",
    "compute_totals_from_people_items",
    "find_existing_share",
    "get_person_breakdown",
    "get_person_total",
    "reconcile_pennies",
    "validate_bill_totals",
    "validate_share_weights",
    "validate_weight_updates",
]
