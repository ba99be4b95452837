# payments/services/payables_service.py

"""
Rent/bill and salary master data, plus the read helpers the payment
router and the payments API share.
"""

from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal

from django.db import IntegrityError, transaction
from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from core.services.exceptions import (
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from payments.models import Payment, RentBill, SalaryRecord, StaffMember
from purchases.models import Supplier
from receivables.models import Receivable

logger = logging.getLogger("payments")

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

MONTH_YEAR_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _paid_for(reference_type: str, reference_id) -> Decimal:
    return Payment.objects.filter(
        reference_type=reference_type, reference_id=reference_id
    ).aggregate(
        total=Coalesce(
            Sum("amount"),
            Value(ZERO),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
    )["total"]


# ============================================================
# RENT / BILLS
# ============================================================


def get_rent_bill(bill_id, *, for_update: bool = False) -> RentBill:
    qs = RentBill.objects.select_for_update() if for_update else RentBill.objects
    try:
        return qs.get(id=bill_id)
    except (RentBill.DoesNotExist, ValueError, TypeError) as exc:
        raise LedgerNotFoundError("Rent/bill not found.") from exc


def create_rent_bill(
    *, title, amount, category: str = "bill", due_date=None, remarks: str = ""
) -> RentBill:
    title = (title or "").strip()
    if not title:
        raise LedgerValidationError("title is required.")

    amt = _money(amount)
    if amt <= ZERO:
        raise LedgerValidationError("Amount must be greater than zero.")

    return RentBill.objects.create(
        title=title,
        category=(category or "bill").strip() or "bill",
        amount=amt,
        due_date=due_date,
        remarks=remarks or "",
    )


def rent_bill_ledger() -> dict:
    bills = list(RentBill.objects.order_by("due_date", "id"))
    payments = list(
        Payment.objects.filter(reference_type=Payment.REF_RENT_BILL)
        .select_related("bank")
        .order_by("payment_date", "id")
    )

    by_bill = {}
    for p in payments:
        by_bill.setdefault(p.reference_id, []).append(p)

    return {
        "bills": [
            {"bill": bill, "payments": by_bill.get(bill.id, [])} for bill in bills
        ],
        "totalAmount": sum((b.amount for b in bills), ZERO),
        "totalPaid": sum((b.paid_amount for b in bills), ZERO),
        "totalBalance": sum((b.balance for b in bills), ZERO),
    }


# ============================================================
# SALARIES
# ============================================================


def get_salary_record(record_id, *, for_update: bool = False) -> SalaryRecord:
    qs = SalaryRecord.objects.select_for_update() if for_update else SalaryRecord.objects
    try:
        return qs.get(id=record_id)
    except (SalaryRecord.DoesNotExist, ValueError, TypeError) as exc:
        raise LedgerNotFoundError("Salary record not found.") from exc


def salary_paid(record: SalaryRecord) -> Decimal:
    return _paid_for(Payment.REF_SALARY, record.id)


def salary_remaining(record: SalaryRecord) -> Decimal:
    return max(ZERO, record.net_salary - salary_paid(record))


def create_salary_record(
    *,
    staff_id,
    month_year: str,
    base_salary=None,
    commission=None,
    advances=None,
    deductions=None,
) -> SalaryRecord:
    staff = StaffMember.objects.filter(id=staff_id).first()
    if staff is None:
        raise LedgerNotFoundError("Staff member not found.")

    month_year = (month_year or "").strip()
    if not MONTH_YEAR_RE.match(month_year):
        raise LedgerValidationError("month_year must be YYYY-MM.")

    parts = {
        "base_salary": staff.fixed_salary if base_salary is None else base_salary,
        "commission": commission,
        "advances": advances,
        "deductions": deductions,
    }
    for label, value in parts.items():
        parts[label] = _money(value)
        if parts[label] < ZERO:
            raise LedgerValidationError(f"{label} cannot be negative.")

    record = SalaryRecord(staff=staff, month_year=month_year, **parts)
    record.recompute_net()

    try:
        with transaction.atomic():
            record.save()
    except IntegrityError as exc:
        raise LedgerConflictError(
            f"Salary for {staff.name} in {month_year} already exists."
        ) from exc

    logger.info(
        "Salary record created",
        extra={
            "salary_record_id": record.id,
            "staff_id": staff.id,
            "net_salary": str(record.net_salary),
        },
    )
    return record


# ============================================================
# PAYMENT LIST LABELS
# ============================================================


def reference_labels(payments) -> dict:
    """
    {payment.id: human label of what it settled}, one query per reference type.
    """
    ids = {}
    for p in payments:
        ids.setdefault(p.reference_type, set()).add(p.reference_id)

    names = {}
    if Payment.REF_SUPPLIER in ids:
        for s in Supplier.objects.filter(id__in=ids[Payment.REF_SUPPLIER]):
            names[(Payment.REF_SUPPLIER, s.id)] = s.name
    if Payment.REF_RENT_BILL in ids:
        for b in RentBill.objects.filter(id__in=ids[Payment.REF_RENT_BILL]):
            names[(Payment.REF_RENT_BILL, b.id)] = b.title
    if Payment.REF_SALARY in ids:
        for r in SalaryRecord.objects.select_related("staff").filter(
            id__in=ids[Payment.REF_SALARY]
        ):
            names[(Payment.REF_SALARY, r.id)] = f"{r.staff.name} ({r.month_year})"
    if Payment.REF_RECEIVABLE in ids:
        for r in Receivable.objects.select_related("customer").filter(
            id__in=ids[Payment.REF_RECEIVABLE]
        ):
            who = r.customer.name if r.customer_id else "Walk-in"
            names[(Payment.REF_RECEIVABLE, r.id)] = f"Receivable #{r.id} - {who}"

    return {
        p.id: names.get(
            (p.reference_type, p.reference_id), f"{p.reference_type} #{p.reference_id}"
        )
        for p in payments
    }
