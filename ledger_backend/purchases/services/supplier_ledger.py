# purchases/services/supplier_ledger.py

"""
Read-side views over supplier invoices.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.services.exceptions import LedgerNotFoundError
from payments.models import Payment
from purchases.models import Purchase, Supplier

ZERO = Decimal("0.00")

DUE_REMINDER_DEFAULT_DAYS = 7
DUE_REMINDER_MAX_DAYS = 60


def _sum(field: str, **kwargs):
    return Coalesce(
        Sum(field, **kwargs),
        Value(ZERO),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


def supplier_ledger(*, supplier_id) -> dict:
    supplier = Supplier.objects.filter(id=supplier_id).first()
    if supplier is None:
        raise LedgerNotFoundError("Supplier not found.")

    purchases = list(
        Purchase.objects.filter(supplier=supplier)
        .select_related("branch")
        .order_by("purchase_date", "id")
    )
    payments = list(
        Payment.objects.filter(
            reference_type=Payment.REF_SUPPLIER, reference_id=supplier.id
        )
        .select_related("bank")
        .order_by("payment_date", "id")
    )

    total_purchases = sum((p.total_amount for p in purchases), ZERO)
    total_paid = sum((p.paid_amount for p in purchases), ZERO)
    balance = sum((p.balance for p in purchases), ZERO)

    return {
        "supplier": supplier,
        "purchases": purchases,
        "payments": payments,
        "totalPurchases": total_purchases,
        "totalPaid": total_paid,
        "balance": balance,
    }


def clamp_reminder_days(days) -> int:
    if days is None:
        return DUE_REMINDER_DEFAULT_DAYS
    return max(0, min(int(days), DUE_REMINDER_MAX_DAYS))


def due_reminders(*, days=None, today=None) -> list[dict]:
    """
    Open invoices whose due date falls on or before today + days.
    Each row is flagged `overdue` (due date passed) or `due_soon`.
    """
    today = today or timezone.localdate()
    horizon = today + timedelta(days=clamp_reminder_days(days))

    rows = []
    qs = (
        Purchase.objects.select_related("supplier", "branch")
        .filter(balance__gt=0, due_date__isnull=False, due_date__lte=horizon)
        .order_by("due_date", "id")
    )
    for purchase in qs:
        rows.append(
            {
                "purchase": purchase,
                "days_left": (purchase.due_date - today).days,
                "flag": "overdue" if purchase.due_date < today else "due_soon",
            }
        )
    return rows


def supplier_summary(*, date_from=None, date_to=None):
    """
    Per-supplier totals over purchases in [date_from, date_to].
    """
    window = Q()
    if date_from:
        window &= Q(purchases__purchase_date__gte=date_from)
    if date_to:
        window &= Q(purchases__purchase_date__lte=date_to)

    return (
        Supplier.objects.annotate(
            invoice_count=Count("purchases", filter=window),
            total_purchases=_sum("purchases__total_amount", filter=window),
            total_paid=_sum("purchases__paid_amount", filter=window),
            balance=_sum("purchases__balance", filter=window),
        )
        .filter(invoice_count__gt=0)
        .order_by("-balance", "name")
    )
