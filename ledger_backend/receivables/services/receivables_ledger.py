# receivables/services/receivables_ledger.py

"""
======================================================
RECEIVABLES LEDGER
======================================================

Writes:
- create_standalone / create_from_sale -> status=pending, amount=original
- recover -> append ReceivableRecovery, shrink amount, move status

Every recovery is voucher-tagged. Rows being recovered are locked with
select_for_update so two recoveries cannot both pass the "amount <= due"
check against the same snapshot.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from core.models import Branch, Customer
from core.services.exceptions import (
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from core.services.numbering import attach_note, next_voucher
from receivables.models import Receivable, ReceivableRecovery
from receivables.services.receivable_lifecycle import apply_recovery

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _positive(amount, *, label: str = "Amount") -> Decimal:
    amt = _money(amount)
    if amt <= Decimal("0.00"):
        raise LedgerValidationError(f"{label} must be greater than zero.")
    return amt


def get_receivable(receivable_id, *, for_update: bool = False) -> Receivable:
    qs = Receivable.objects.all()
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(id=receivable_id)
    except (Receivable.DoesNotExist, ValueError, TypeError) as exc:
        raise LedgerNotFoundError("Receivable not found.") from exc


# ============================================================
# CREATE
# ============================================================


@transaction.atomic
def create_standalone(
    *, customer_id, amount, due_date=None, branch_id=None
) -> Receivable:
    amt = _positive(amount)

    customer = None
    if customer_id:
        customer = Customer.objects.filter(id=customer_id).first()
        if customer is None:
            raise LedgerNotFoundError("Customer not found.")

    branch = None
    if branch_id:
        branch = Branch.objects.filter(id=branch_id).first()
        if branch is None:
            raise LedgerNotFoundError("Branch not found.")

    receivable = Receivable.objects.create(
        customer=customer,
        branch=branch,
        original_amount=amt,
        amount=amt,
        due_date=due_date,
        status=Receivable.STATUS_PENDING,
    )
    logger.info(
        "Receivable created",
        extra={"receivable_id": receivable.id, "amount": str(amt)},
    )
    return receivable


def create_from_sale(*, sale, amount, due_date=None) -> Receivable:
    """
    Called inside the sale's own atomic block.
    """
    amt = _positive(amount, label="Credit amount")
    return Receivable.objects.create(
        customer_id=sale.customer_id,
        sale=sale,
        branch_id=sale.branch_id,
        original_amount=amt,
        amount=amt,
        due_date=due_date,
        status=Receivable.STATUS_PENDING,
    )


# ============================================================
# RECOVER
# ============================================================


@transaction.atomic
def recover(
    *,
    receivable_id,
    amount,
    remarks: str = "",
    voucher: str | None = None,
    recorded_at=None,
) -> ReceivableRecovery:
    """
    Apply a recovery. Issues its own voucher unless the caller already
    issued one for the enclosing operation.
    """
    amt = _positive(amount)
    receivable = get_receivable(receivable_id, for_update=True)

    if amt > receivable.amount:
        raise LedgerConflictError(
            f"Amount exceeds receivable balance ({receivable.amount})."
        )

    voucher = voucher or next_voucher()
    remaining = receivable.amount - amt

    recovery = ReceivableRecovery.objects.create(
        receivable=receivable,
        amount=amt,
        remarks=attach_note(remarks, voucher),
        recorded_at=recorded_at or timezone.now(),
    )

    apply_recovery(receivable=receivable, remaining=remaining)
    receivable.save(update_fields=["amount", "status"])

    logger.info(
        "Receivable recovery recorded",
        extra={
            "receivable_id": receivable.id,
            "amount": str(amt),
            "remaining": str(receivable.amount),
            "status": receivable.status,
            "voucher": voucher,
        },
    )
    return recovery


@transaction.atomic
def update_due_date(*, receivable_id, due_date) -> Receivable:
    receivable = get_receivable(receivable_id, for_update=True)
    receivable.due_date = due_date
    receivable.save(update_fields=["due_date"])
    return receivable


def delete_for_sale(sale_id) -> int:
    """
    Remove receivables generated by a sale together with their recoveries.
    Called inside the sale's own atomic block.
    """
    linked = Receivable.objects.filter(sale_id=sale_id)
    ReceivableRecovery.objects.filter(receivable__in=linked).delete()
    deleted, _ = linked.delete()
    return deleted
