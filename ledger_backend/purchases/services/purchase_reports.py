# purchases/services/purchase_reports.py

"""
Purchase volume reads. Every total is Σ total_amount over the selected rows.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal

from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from core.services.exceptions import LedgerValidationError
from purchases.models import Purchase

ZERO = Decimal("0.00")


def _window(date_from, date_to, branch_id=None):
    qs = Purchase.objects.select_related("supplier", "branch").filter(
        purchase_date__gte=date_from, purchase_date__lte=date_to
    )
    if branch_id:
        qs = qs.filter(branch_id=branch_id)
    return qs


def daily_summary(*, day, branch_id=None) -> dict:
    qs = _window(day, day, branch_id).order_by("id")
    total = qs.aggregate(
        total=Coalesce(
            Sum("total_amount"),
            Value(ZERO),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
    )["total"]
    return {"date": day, "branch_id": branch_id, "rows": list(qs), "total": total}


def monthly_summary(*, year: int, month: int, branch_id=None) -> dict:
    """
    Purchases per (day, branch) for one calendar month.
    """
    if not 1 <= month <= 12:
        raise LedgerValidationError("month must be 1-12.")

    date_from = date(year, month, 1)
    date_to = date(year, month, calendar.monthrange(year, month)[1])

    rows = list(
        _window(date_from, date_to, branch_id)
        .values("purchase_date", "branch_id", "branch__name")
        .annotate(daily_total=Sum("total_amount"))
        .order_by("purchase_date", "branch_id")
    )
    return {
        "year": year,
        "month": month,
        "from": date_from,
        "to": date_to,
        "rows": rows,
        "total": sum((r["daily_total"] for r in rows), ZERO),
    }
