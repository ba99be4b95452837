# cashbook/services/cash_register.py

"""
CASH REGISTER

One entry per (branch, date).

    expected   = opening + sales - expense - deposit + withdrawal
    difference = closing - expected

No closing figure => closing defaults to expected, difference is 0.
A second create for the same (branch, date) is a conflict; edits go
through update_entry().
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import IntegrityError, transaction
from django.db.models import F, Sum
from django.db.models.functions import Abs

from cashbook.models import CashEntry
from core.models import Branch
from core.services.exceptions import (
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from core.services.numbering import attach_note, next_voucher

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

AMOUNT_FIELDS = (
    "opening_cash",
    "sales_cash",
    "expense_cash",
    "bank_deposit",
    "bank_withdrawal",
)


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def expected_closing(
    *, opening_cash, sales_cash, expense_cash, bank_deposit, bank_withdrawal
) -> Decimal:
    return (
        _money(opening_cash)
        + _money(sales_cash)
        - _money(expense_cash)
        - _money(bank_deposit)
        + _money(bank_withdrawal)
    )


def reconcile(amounts: dict, closing_cash=None):
    """
    Returns (expected, closing, difference) for the given amounts.
    """
    expected = expected_closing(**{f: amounts.get(f) for f in AMOUNT_FIELDS})
    closing = expected if closing_cash is None else _money(closing_cash)
    return expected, closing, closing - expected


def _get_branch(branch_id) -> Branch:
    try:
        return Branch.objects.get(id=branch_id)
    except (Branch.DoesNotExist, ValueError, TypeError) as exc:
        raise LedgerNotFoundError("Branch not found.") from exc


@transaction.atomic
def create_entry(
    *,
    branch_id,
    entry_date,
    opening_cash=None,
    sales_cash=None,
    expense_cash=None,
    bank_deposit=None,
    bank_withdrawal=None,
    closing_cash=None,
    remarks: str = "",
) -> CashEntry:
    if not entry_date:
        raise LedgerValidationError("entry_date is required.")

    branch = _get_branch(branch_id)

    duplicate_msg = "Cash entry already exists for this branch and date."
    if CashEntry.objects.filter(branch=branch, entry_date=entry_date).exists():
        raise LedgerConflictError(duplicate_msg)

    amounts = {
        "opening_cash": _money(opening_cash),
        "sales_cash": _money(sales_cash),
        "expense_cash": _money(expense_cash),
        "bank_deposit": _money(bank_deposit),
        "bank_withdrawal": _money(bank_withdrawal),
    }
    _, closing, difference = reconcile(amounts, closing_cash)

    voucher = next_voucher()

    try:
        with transaction.atomic():
            entry = CashEntry.objects.create(
                branch=branch,
                entry_date=entry_date,
                closing_cash=closing,
                difference=difference,
                remarks=attach_note(remarks, voucher),
                **amounts,
            )
    except IntegrityError as exc:
        raise LedgerConflictError(duplicate_msg) from exc

    if difference:
        logger.warning(
            "Cash entry recorded with a difference",
            extra={
                "branch_id": branch.id,
                "entry_date": str(entry_date),
                "difference": str(difference),
                "voucher": voucher,
            },
        )
    else:
        logger.info(
            "Cash entry recorded",
            extra={"branch_id": branch.id, "entry_date": str(entry_date)},
        )

    return entry


def get_entry(*, branch_id, entry_date) -> CashEntry:
    entry = (
        CashEntry.objects.select_related("branch")
        .filter(branch_id=branch_id, entry_date=entry_date)
        .first()
    )
    if entry is None:
        raise LedgerNotFoundError("Cash entry not found.")
    return entry


@transaction.atomic
def update_entry(*, branch_id, entry_date, data: dict) -> CashEntry:
    """
    PATCH semantics: absent keys keep their stored values; an explicit
    null closing_cash resets closing to the expected value.
    """
    entry = (
        CashEntry.objects.select_for_update()
        .filter(branch_id=branch_id, entry_date=entry_date)
        .first()
    )
    if entry is None:
        raise LedgerNotFoundError("Cash entry not found.")

    for field in AMOUNT_FIELDS:
        if field in data:
            setattr(entry, field, _money(data[field]))

    closing_cash = data["closing_cash"] if "closing_cash" in data else entry.closing_cash
    _, entry.closing_cash, entry.difference = reconcile(
        {f: getattr(entry, f) for f in AMOUNT_FIELDS}, closing_cash
    )

    if "remarks" in data:
        entry.remarks = data["remarks"] or ""

    entry.save()
    return entry


# ============================================================
# READS
# ============================================================


def list_entries(*, branch_id=None, date_from=None, date_to=None):
    qs = CashEntry.objects.select_related("branch")
    if branch_id:
        qs = qs.filter(branch_id=branch_id)
    if date_from:
        qs = qs.filter(entry_date__gte=date_from)
    if date_to:
        qs = qs.filter(entry_date__lte=date_to)
    return qs.order_by("-entry_date", "branch_id")


def branch_summary(*, day) -> dict:
    rows = CashEntry.objects.select_related("branch").filter(entry_date=day)
    totals = rows.aggregate(opening=Sum("opening_cash"), closing=Sum("closing_cash"))
    return {
        "date": day,
        "rows": list(rows.order_by("branch_id")),
        "totalOpening": _money(totals["opening"]),
        "totalClosing": _money(totals["closing"]),
    }


def difference_alerts(*, day) -> dict:
    rows = (
        CashEntry.objects.select_related("branch")
        .filter(entry_date=day)
        .exclude(difference=0)
        .annotate(abs_difference=Abs(F("difference")))
        .order_by("-abs_difference", "branch_id")
    )
    return {"date": day, "rows": list(rows)}
