# payments/services/payment_router.py

"""
======================================================
PAYMENT ROUTER
======================================================

One entry point for every outgoing/incoming settlement:

    category            ledger mutation                       bank tx type
    ------------------  ------------------------------------  ------------
    supplier            FIFO allocation over open invoices    payment
    rent_bill           paid_amount += amount, status         payment
    salary              status from Σ salary payments          payment
    receivable_recovery receivables_ledger.recover            deposit

Order inside ONE transaction:
    validate -> preconditions -> voucher -> mutation -> bank tx -> Payment row

A failure at any step rolls back every earlier write, including the
voucher counter advance.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from banking.models import BankTransaction
from banking.services.bank_ledger import record_transaction, with_balances
from core.services.exceptions import (
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from core.services.numbering import attach_note, next_voucher
from payments.models import Payment, RentBill, SalaryRecord
from payments.services import bill_lifecycle
from payments.services.payables_service import (
    get_rent_bill,
    get_salary_record,
    salary_paid,
    salary_remaining,
)
from payments.services.payment_method import resolve_payment_method
from purchases.models import Supplier
from purchases.services.supplier_allocation import allocate_supplier_payment
from receivables.services import receivables_ledger

logger = logging.getLogger("payments")

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

CATEGORIES = tuple(choice for choice, _ in Payment.CATEGORY_CHOICES)


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


# ============================================================
# PRECONDITIONS (no writes)
# ============================================================


def _check_supplier(reference_id, amount):
    if not Supplier.objects.filter(id=reference_id).exists():
        raise LedgerNotFoundError("Supplier not found.")


def _check_rent_bill(reference_id, amount):
    bill = get_rent_bill(reference_id, for_update=True)
    if amount > bill.balance:
        raise LedgerConflictError(f"Amount exceeds bill balance ({bill.balance}).")
    return bill


def _check_salary(reference_id, amount):
    record = get_salary_record(reference_id, for_update=True)
    if record.status == SalaryRecord.STATUS_PAID:
        raise LedgerConflictError("Salary already paid.")
    remaining = salary_remaining(record)
    if amount > remaining:
        raise LedgerConflictError(f"Amount exceeds remaining salary ({remaining}).")
    return record


def _check_receivable(reference_id, amount):
    receivable = receivables_ledger.get_receivable(reference_id, for_update=True)
    if amount > receivable.amount:
        raise LedgerConflictError(
            f"Amount exceeds receivable balance ({receivable.amount})."
        )
    return receivable


PRECONDITIONS = {
    Payment.CATEGORY_SUPPLIER: _check_supplier,
    Payment.CATEGORY_RENT_BILL: _check_rent_bill,
    Payment.CATEGORY_SALARY: _check_salary,
    Payment.CATEGORY_RECEIVABLE_RECOVERY: _check_receivable,
}


# ============================================================
# LEDGER MUTATIONS
# ============================================================


def _apply_rent_bill(bill: RentBill, amount: Decimal):
    bill.paid_amount = _money(bill.paid_amount) + amount
    bill_lifecycle.apply_payment_status(bill, paid=bill.paid_amount, due=bill.amount)
    bill.save(update_fields=["paid_amount", "status", "updated_at"])


def _apply_salary(record: SalaryRecord, amount: Decimal):
    paid_after = salary_paid(record) + amount
    bill_lifecycle.apply_payment_status(record, paid=paid_after, due=record.net_salary)
    record.save(update_fields=["status"])


# ============================================================
# PUBLIC API
# ============================================================


@transaction.atomic
def pay(
    *,
    category: str,
    reference_id,
    amount,
    payment_method="cash",
    payment_date=None,
    remarks: str = "",
) -> Payment:
    category = (category or "").strip()
    if category not in CATEGORIES:
        raise LedgerValidationError(
            f"Invalid category. Use one of: {', '.join(CATEGORIES)}."
        )

    if reference_id in (None, ""):
        raise LedgerValidationError("reference_id is required.")
    try:
        reference_id = int(reference_id)
    except (TypeError, ValueError) as exc:
        raise LedgerValidationError("reference_id must be an integer.") from exc

    amt = _money(amount)
    if amt <= ZERO:
        raise LedgerValidationError("Amount must be greater than zero.")

    mode, bank = resolve_payment_method(payment_method)

    target = PRECONDITIONS[category](reference_id, amt)

    voucher = next_voucher()
    pay_date = payment_date or timezone.localdate()
    note = attach_note(remarks, voucher)

    if category == Payment.CATEGORY_SUPPLIER:
        allocate_supplier_payment(supplier_id=reference_id, amount=amt)
    elif category == Payment.CATEGORY_RENT_BILL:
        _apply_rent_bill(target, amt)
    elif category == Payment.CATEGORY_SALARY:
        _apply_salary(target, amt)
    else:
        receivables_ledger.recover(
            receivable_id=target.id, amount=amt, remarks=remarks, voucher=voucher
        )

    if bank is not None:
        tx_type = (
            BankTransaction.TYPE_DEPOSIT
            if category == Payment.CATEGORY_RECEIVABLE_RECOVERY
            else BankTransaction.TYPE_PAYMENT
        )
        record_transaction(
            bank_id=bank.id,
            type=tx_type,
            amount=amt,
            transaction_date=pay_date,
            reference=voucher,
            description=f"{category} #{reference_id}",
        )

    payment = Payment.objects.create(
        category=category,
        reference_type=Payment.REFERENCE_TYPE_BY_CATEGORY[category],
        reference_id=reference_id,
        amount=amt,
        payment_date=pay_date,
        mode=mode,
        bank=bank,
        voucher_no=voucher,
        remarks=note,
    )

    logger.info(
        "Payment recorded",
        extra={
            "payment_id": payment.id,
            "category": category,
            "reference_id": reference_id,
            "amount": str(amt),
            "mode": mode,
            "voucher": voucher,
        },
    )
    return payment


def payment_options() -> dict:
    """
    What the payment form can settle right now.
    """
    rent_bills = list(
        RentBill.objects.filter(status__in=RentBill.OPEN_STATUSES).order_by(
            "due_date", "id"
        )
    )

    salaries = []
    for record in (
        SalaryRecord.objects.select_related("staff")
        .exclude(status=SalaryRecord.STATUS_PAID)
        .order_by("-month_year", "staff__name")
    ):
        remaining = salary_remaining(record)
        if remaining > ZERO:
            salaries.append({"record": record, "remaining": remaining})

    return {
        "rent_bills": rent_bills,
        "salaries": salaries,
        "banks": list(with_balances().order_by("name")),
    }
