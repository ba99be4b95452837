# sales/services/sale_reports.py

"""
Net-sales reads. Every total is Σ net_sales over the selected rows.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal

from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from core.services.exceptions import LedgerValidationError
from sales.models import Sale

ZERO = Decimal("0.00")


def _window(date_from=None, date_to=None, branch_id=None):
    qs = Sale.objects.select_related("branch", "customer")
    if date_from:
        qs = qs.filter(sale_date__gte=date_from)
    if date_to:
        qs = qs.filter(sale_date__lte=date_to)
    if branch_id:
        qs = qs.filter(branch_id=branch_id)
    return qs


def _net_total(qs) -> Decimal:
    return qs.aggregate(
        total=Coalesce(
            Sum("net_sales"),
            Value(ZERO),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
    )["total"]


def net_sales_total(*, date_from, date_to, branch_id=None) -> Decimal:
    return _net_total(_window(date_from, date_to, branch_id))


def daily_summary(*, day, branch_id=None) -> dict:
    qs = _window(day, day, branch_id).order_by("branch_id", "id")
    return {
        "date": day,
        "branch_id": branch_id,
        "rows": list(qs),
        "total": _net_total(qs),
    }


def range_summary(*, date_from, date_to, branch_id=None) -> dict:
    if date_from > date_to:
        raise LedgerValidationError("'from' must be on or before 'to'.")

    qs = _window(date_from, date_to, branch_id).order_by("-sale_date", "branch_id")
    return {
        "from": date_from,
        "to": date_to,
        "branch_id": branch_id,
        "rows": list(qs),
        "total": _net_total(qs),
    }


def monthly_summary(*, year: int, month: int, branch_id=None) -> dict:
    """
    Net sales per (day, branch) for one calendar month.
    """
    if not 1 <= month <= 12:
        raise LedgerValidationError("month must be 1-12.")

    date_from = date(year, month, 1)
    date_to = date(year, month, calendar.monthrange(year, month)[1])

    qs = _window(date_from, date_to, branch_id)
    rows = list(
        qs.values("sale_date", "branch_id", "branch__name")
        .annotate(daily_total=Sum("net_sales"))
        .order_by("sale_date", "branch_id")
    )
    return {
        "year": year,
        "month": month,
        "from": date_from,
        "to": date_to,
        "rows": rows,
        "total": sum((r["daily_total"] for r in rows), ZERO),
    }
