# purchases/services/supplier_allocation.py

"""
======================================================
SUPPLIER PAYMENT ALLOCATION (FIFO)
======================================================

A lump payment to a supplier is applied to the oldest open invoices first:

- candidates: supplier's purchases with balance > 0
- order: purchase_date ASC, id ASC (id breaks same-day ties)
- each step: apply = min(remaining, balance)
- stop when the payment is used up or invoices run out

Leftover (payment > total outstanding) is not carried anywhere; the
caller's Payment audit row records the full amount.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction

from core.services.exceptions import LedgerNotFoundError, LedgerValidationError
from purchases.models import Purchase, Supplier

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Allocation:
    purchase_id: int
    invoice_no: str
    applied: Decimal
    balance_after: Decimal


@dataclass(frozen=True)
class AllocationResult:
    supplier_id: int
    amount: Decimal
    allocations: list
    unallocated: Decimal


@transaction.atomic
def allocate_supplier_payment(*, supplier_id, amount) -> AllocationResult:
    amt = _money(amount)
    if amt <= ZERO:
        raise LedgerValidationError("Amount must be greater than zero.")

    if not Supplier.objects.filter(id=supplier_id).exists():
        raise LedgerNotFoundError("Supplier not found.")

    open_invoices = (
        Purchase.objects.select_for_update()
        .filter(supplier_id=supplier_id, balance__gt=0)
        .order_by("purchase_date", "id")
    )

    remaining = amt
    allocations = []

    for invoice in open_invoices:
        if remaining <= ZERO:
            break

        apply = min(remaining, invoice.balance)
        invoice.paid_amount = _money(invoice.paid_amount) + apply
        invoice.save(update_fields=["paid_amount"])
        remaining -= apply

        allocations.append(
            Allocation(
                purchase_id=invoice.id,
                invoice_no=invoice.invoice_no,
                applied=apply,
                balance_after=invoice.balance,
            )
        )

    if remaining > ZERO:
        logger.warning(
            "Supplier payment exceeds outstanding invoices",
            extra={"supplier_id": supplier_id, "unallocated": str(remaining)},
        )

    return AllocationResult(
        supplier_id=int(supplier_id),
        amount=amt,
        allocations=allocations,
        unallocated=remaining,
    )
