# receivables/services/customer_ledger.py

"""
Read-side views over receivables.

Ledger entries:
- each receivable is a CREDIT of its original amount
- each recovery is a DEBIT
- sorted by timestamp, running balance = Σ credit − Σ debit
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.models import Branch, Customer
from core.services.exceptions import LedgerNotFoundError
from receivables.models import Receivable, ReceivableRecovery

ZERO = Decimal("0.00")


def _build_ledger(receivables, recoveries, *, receivable_label: str) -> dict:
    entries = []
    for r in receivables:
        label = f"{receivable_label} #{r.id}"
        if r.branch_id:
            label = f"{label} ({r.branch.name})"
        entries.append(
            {
                "id": f"rec-{r.id}",
                "type": "receivable",
                "date": timezone.localtime(r.created_at).date(),
                "sort_key": r.created_at,
                "description": label,
                "credit": r.original_amount,
                "debit": ZERO,
            }
        )

    for rr in recoveries:
        entries.append(
            {
                "id": f"recovery-{rr.id}",
                "type": "recovery",
                "date": timezone.localtime(rr.recorded_at).date(),
                "sort_key": rr.recorded_at,
                "description": f"Recovery - {rr.remarks}" if rr.remarks else "Recovery",
                "credit": ZERO,
                "debit": rr.amount,
            }
        )

    # receivable rows sort before their recoveries on equal timestamps
    entries.sort(key=lambda e: (e["sort_key"], e["type"] != "receivable"))

    running = ZERO
    for e in entries:
        running += e["credit"] - e["debit"]
        e["balance"] = running
        del e["sort_key"]

    total_due = sum(
        (r.amount for r in receivables if r.status in Receivable.OPEN_STATUSES), ZERO
    )
    recovered_total = sum((rr.amount for rr in recoveries), ZERO)

    return {
        "receivables": list(receivables),
        "recoveries": list(recoveries),
        "entries": entries,
        "totalDue": total_due,
        "recoveredTotal": recovered_total,
    }


def customer_ledger(*, customer_id) -> dict:
    customer = Customer.objects.filter(id=customer_id).first()
    if customer is None:
        raise LedgerNotFoundError("Customer not found.")

    receivables = list(
        Receivable.objects.select_related("branch")
        .filter(customer=customer)
        .order_by("created_at", "id")
    )
    recoveries = list(
        ReceivableRecovery.objects.filter(receivable__customer=customer).order_by(
            "recorded_at", "id"
        )
    )
    result = _build_ledger(receivables, recoveries, receivable_label="Receivable")
    result["customer"] = customer
    return result


def branch_ledger(*, branch_id) -> dict:
    branch = Branch.objects.filter(id=branch_id).first()
    if branch is None:
        raise LedgerNotFoundError("Branch not found.")

    receivables = list(
        Receivable.objects.select_related("branch")
        .filter(branch=branch)
        .order_by("created_at", "id")
    )
    recoveries = list(
        ReceivableRecovery.objects.filter(receivable__branch=branch).order_by(
            "recorded_at", "id"
        )
    )
    result = _build_ledger(receivables, recoveries, receivable_label="Credit sale")
    result["branch"] = branch
    return result


def overdue(*, today=None):
    today = today or timezone.localdate()
    return (
        Receivable.objects.select_related("customer", "branch")
        .filter(status=Receivable.STATUS_PENDING, due_date__lt=today)
        .order_by("due_date", "id")
    )


def customers_with_balance():
    return Customer.objects.annotate(
        total_due=Coalesce(
            Sum(
                "receivables__amount",
                filter=Q(receivables__status__in=Receivable.OPEN_STATUSES),
            ),
            Value(ZERO),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
    ).order_by("name")
