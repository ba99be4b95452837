# purchases/services/invoice_service.py

"""
PURCHASE INVOICES

- create_invoice: invoice_no auto-generated from the invoice counter when blank
- edit_invoice:   PATCH semantics, balance recomputed by the model
- apply_payment:  paid_amount += amount (single invoice)
- pay_invoice:    voucher + apply_payment + optional bank debit + Payment audit,
                  as one atomic unit
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from banking.models import BankTransaction
from banking.services.bank_ledger import record_transaction
from core.models import Branch
from core.services.exceptions import (
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from core.services.numbering import attach_note, next_invoice_number, next_voucher
from payments.models import Payment
from payments.services.payment_method import resolve_payment_method
from purchases.models import Purchase, Supplier

logger = logging.getLogger("payments")

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _non_negative(value, label: str) -> Decimal:
    amt = _money(value)
    if amt < ZERO:
        raise LedgerValidationError(f"{label} cannot be negative.")
    return amt


def _check_supplier(supplier_id) -> Supplier:
    supplier = Supplier.objects.filter(id=supplier_id).first() if supplier_id else None
    if supplier is None:
        raise LedgerNotFoundError("Supplier not found.")
    return supplier


def _check_branch(branch_id):
    if not branch_id:
        return None
    branch = Branch.objects.filter(id=branch_id).first()
    if branch is None:
        raise LedgerNotFoundError("Branch not found.")
    return branch


def get_purchase(purchase_id, *, for_update: bool = False) -> Purchase:
    qs = Purchase.objects.select_related("supplier", "branch")
    if for_update:
        qs = Purchase.objects.select_for_update()
    try:
        return qs.get(id=purchase_id)
    except (Purchase.DoesNotExist, ValueError, TypeError) as exc:
        raise LedgerNotFoundError("Purchase not found.") from exc


def _save_unique(purchase: Purchase, **save_kwargs) -> Purchase:
    try:
        with transaction.atomic():
            purchase.save(**save_kwargs)
    except IntegrityError as exc:
        raise LedgerConflictError(
            f"Invoice number '{purchase.invoice_no}' already exists."
        ) from exc
    return purchase


@transaction.atomic
def create_invoice(
    *,
    supplier_id,
    total_amount,
    purchase_date=None,
    paid_amount=None,
    invoice_no: str | None = None,
    branch_id=None,
    due_date=None,
    remarks: str = "",
) -> Purchase:
    supplier = _check_supplier(supplier_id)
    branch = _check_branch(branch_id)

    total = _non_negative(total_amount, "total_amount")
    paid = _non_negative(paid_amount, "paid_amount")

    number = (invoice_no or "").strip() or next_invoice_number()

    purchase = Purchase(
        supplier=supplier,
        branch=branch,
        invoice_no=number,
        purchase_date=purchase_date or timezone.localdate(),
        due_date=due_date,
        total_amount=total,
        paid_amount=paid,
        remarks=remarks or "",
    )
    _save_unique(purchase)

    logger.info(
        "Purchase invoice created",
        extra={
            "purchase_id": purchase.id,
            "invoice_no": purchase.invoice_no,
            "balance": str(purchase.balance),
        },
    )
    return purchase


@transaction.atomic
def edit_invoice(*, purchase_id, data: dict) -> Purchase:
    purchase = get_purchase(purchase_id, for_update=True)

    if "supplier_id" in data:
        purchase.supplier = _check_supplier(data["supplier_id"])
    if "branch_id" in data:
        purchase.branch = _check_branch(data["branch_id"])
    if "invoice_no" in data:
        number = (data["invoice_no"] or "").strip()
        if not number:
            raise LedgerValidationError("invoice_no cannot be blank.")
        purchase.invoice_no = number
    if data.get("purchase_date"):
        purchase.purchase_date = data["purchase_date"]
    if "due_date" in data:
        purchase.due_date = data["due_date"]
    if "total_amount" in data:
        purchase.total_amount = _non_negative(data["total_amount"], "total_amount")
    if "paid_amount" in data:
        purchase.paid_amount = _non_negative(data["paid_amount"], "paid_amount")
    if "remarks" in data:
        purchase.remarks = data["remarks"] or ""

    return _save_unique(purchase)


def apply_payment(*, purchase_id, amount) -> Purchase:
    """
    paid_amount += amount; balance = max(0, total - paid).
    Runs inside the caller's transaction.
    """
    amt = _money(amount)
    if amt <= ZERO:
        raise LedgerValidationError("Amount must be greater than zero.")

    purchase = get_purchase(purchase_id, for_update=True)
    purchase.paid_amount = _money(purchase.paid_amount) + amt
    purchase.save(update_fields=["paid_amount"])
    return purchase


@transaction.atomic
def pay_invoice(
    *,
    purchase_id,
    amount,
    payment_method="cash",
    payment_date=None,
    remarks: str = "",
):
    """
    Direct payment against one invoice. Returns (purchase, payment).
    """
    mode, bank = resolve_payment_method(payment_method)
    get_purchase(purchase_id)

    voucher = next_voucher()
    pay_date = payment_date or timezone.localdate()

    purchase = apply_payment(purchase_id=purchase_id, amount=amount)
    amt = _money(amount)
    note = attach_note(remarks or f"Invoice {purchase.invoice_no}", voucher)

    if bank is not None:
        record_transaction(
            bank_id=bank.id,
            type=BankTransaction.TYPE_PAYMENT,
            amount=amt,
            transaction_date=pay_date,
            reference=voucher,
            description=f"Supplier payment {purchase.invoice_no}",
        )

    payment = Payment.objects.create(
        category=Payment.CATEGORY_SUPPLIER,
        reference_type=Payment.REF_SUPPLIER,
        reference_id=purchase.supplier_id,
        amount=amt,
        payment_date=pay_date,
        mode=mode,
        bank=bank,
        voucher_no=voucher,
        remarks=note,
    )

    logger.info(
        "Purchase invoice payment recorded",
        extra={
            "purchase_id": purchase.id,
            "payment_id": payment.id,
            "amount": str(amt),
            "balance": str(purchase.balance),
            "voucher": voucher,
        },
    )
    return purchase, payment
