# sales/services/sale_service.py

"""
======================================================
SALES LEDGER (WRITE SIDE)
======================================================

record_sale / edit_sale / delete_sale / lock_sale, each one atomic unit.

Side effects of a sale are DERIVED and are rebuilt, never patched:
- SaleBankSplit rows
- BankTransaction(deposit) rows referenced "sale-<id>"
- the Receivable generated from credit_amount (created once, on record)

edit_sale deletes splits + deposits and re-inserts them from the
recomputed figures, so split count, targets and amounts may all change.
"""

from __future__ import annotations

import logging
import re
import time
from decimal import ROUND_HALF_UP, Decimal

from django.core.files.storage import default_storage
from django.db import transaction

from banking.models import Bank, BankTransaction
from banking.services import bank_ledger
from core.models import Branch, Customer
from core.services.exceptions import LedgerNotFoundError, LedgerValidationError
from core.services.numbering import attach_note, next_voucher
from receivables.services import receivables_ledger
from sales.models import Sale, SaleAttachment, SaleBankSplit
from sales.services import sale_lifecycle
from sales.services.sale_math import compute_net_sales

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

AMOUNT_FIELDS = (
    "cash_amount",
    "bank_amount",
    "credit_amount",
    "discount",
    "returns_amount",
)

ATTACHMENT_MAX_FILES = 10
ATTACHMENT_MAX_BYTES = 10 * 1024 * 1024
ATTACHMENT_DIR = "sales"


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _amount(data: dict, field: str, default=ZERO) -> Decimal:
    if field not in data:
        return default
    value = _money(data.get(field))
    if value < ZERO:
        raise LedgerValidationError(f"{field} cannot be negative.")
    return value


def _as_id(value):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise LedgerValidationError(f"Invalid id: {value!r}.") from exc


def get_sale(sale_id, *, for_update: bool = False) -> Sale:
    qs = Sale.objects.select_for_update() if for_update else Sale.objects
    try:
        return qs.get(id=sale_id)
    except (Sale.DoesNotExist, ValueError, TypeError) as exc:
        raise LedgerNotFoundError("Sale not found.") from exc


def _resolve_ref(model, value, label: str):
    ref_id = _as_id(value)
    if ref_id is None:
        return None
    obj = model.objects.filter(id=ref_id).first()
    if obj is None:
        raise LedgerNotFoundError(f"{label} not found.")
    return obj


# ============================================================
# BANK LEGS
# ============================================================


def valid_splits(raw_splits) -> list[tuple[Bank, Decimal]]:
    """
    Keep splits that name an existing bank with a positive amount;
    everything else is dropped.
    """
    candidates = []
    for split in raw_splits or []:
        try:
            bank_id = _as_id(split.get("bank_id"))
        except LedgerValidationError:
            continue
        amount = _money(split.get("amount"))
        if bank_id and amount > ZERO:
            candidates.append((bank_id, amount))

    banks = Bank.objects.in_bulk({bank_id for bank_id, _ in candidates})
    return [
        (banks[bank_id], amount) for bank_id, amount in candidates if bank_id in banks
    ]


def _resolve_bank_legs(*, splits, bank_amount: Decimal, bank_id):
    """
    Returns (bank_amount, primary_bank, legs).
    """
    if splits:
        total = sum((amount for _, amount in splits), ZERO)
        return total, splits[0][0], splits

    bank = None
    if bank_id is not None:
        bank = Bank.objects.filter(id=bank_id).first()

    if bank_amount > ZERO:
        if bank_id is None:
            raise LedgerValidationError(
                "Bank account is required when entering bank amount."
            )
        if bank is None:
            raise LedgerValidationError("Selected bank account not found.")
        return bank_amount, bank, []

    return bank_amount, bank, []


def _write_bank_legs(sale: Sale, legs) -> int:
    if sale.bank_amount <= ZERO:
        return 0

    deposits = legs or [(sale.bank, sale.bank_amount)]
    for bank, amount in legs:
        SaleBankSplit.objects.create(sale=sale, bank=bank, amount=amount)

    for bank, amount in deposits:
        bank_ledger.record_transaction(
            bank_id=bank.id,
            type=BankTransaction.TYPE_DEPOSIT,
            amount=amount,
            transaction_date=sale.sale_date,
            reference=bank_ledger.sale_reference(sale.id),
            description="Sale collection",
        )
    return len(deposits)


# ============================================================
# WRITES
# ============================================================


@transaction.atomic
def record_sale(*, data: dict, user=None) -> Sale:
    amounts = {field: _amount(data, field) for field in AMOUNT_FIELDS}

    splits = valid_splits(data.get("bank_splits"))
    bank_amount, primary_bank, legs = _resolve_bank_legs(
        splits=splits,
        bank_amount=amounts["bank_amount"],
        bank_id=_as_id(data.get("bank_id")),
    )
    amounts["bank_amount"] = bank_amount

    branch = _resolve_ref(Branch, data.get("branch_id"), "Branch")
    customer = _resolve_ref(Customer, data.get("customer_id"), "Customer")

    voucher = next_voucher()

    sale_kwargs = {
        "branch": branch,
        "customer": customer,
        "bank": primary_bank,
        "sale_type": data.get("sale_type") or Sale.TYPE_CASH,
        "net_sales": compute_net_sales(
            cash=amounts["cash_amount"],
            bank=amounts["bank_amount"],
            credit=amounts["credit_amount"],
            discount=amounts["discount"],
            returns=amounts["returns_amount"],
        ),
        "remarks": attach_note(data.get("remarks"), voucher),
        "voucher_no": voucher,
        "created_by": user if getattr(user, "is_authenticated", False) else None,
        **amounts,
    }
    if data.get("sale_date"):
        sale_kwargs["sale_date"] = data["sale_date"]

    sale = Sale.objects.create(**sale_kwargs)

    if sale.credit_amount > ZERO:
        receivables_ledger.create_from_sale(
            sale=sale, amount=sale.credit_amount, due_date=data.get("due_date")
        )

    deposits = _write_bank_legs(sale, legs)

    logger.info(
        "Sale recorded",
        extra={
            "sale_id": sale.id,
            "net_sales": str(sale.net_sales),
            "deposits": deposits,
            "voucher": voucher,
        },
    )
    return sale


@transaction.atomic
def edit_sale(*, sale_id, data: dict) -> Sale:
    """
    PATCH semantics: absent fields keep their stored values. Absent
    bank_splits keeps the stored splits unless bank_amount or bank_id is
    given, in which case the single-bank path applies; an empty list
    clears them.
    """
    sale = get_sale(sale_id, for_update=True)
    sale_lifecycle.ensure_mutable(sale)

    amounts = {
        field: _amount(data, field, default=getattr(sale, field))
        for field in AMOUNT_FIELDS
    }

    if "bank_splits" in data:
        splits = valid_splits(data.get("bank_splits"))
    elif "bank_amount" in data or "bank_id" in data:
        splits = []
    else:
        splits = [(s.bank, s.amount) for s in sale.bank_splits.select_related("bank")]

    bank_id = _as_id(data["bank_id"]) if "bank_id" in data else sale.bank_id
    bank_amount, primary_bank, legs = _resolve_bank_legs(
        splits=splits, bank_amount=amounts["bank_amount"], bank_id=bank_id
    )
    amounts["bank_amount"] = bank_amount

    if "branch_id" in data:
        sale.branch = _resolve_ref(Branch, data["branch_id"], "Branch")
    if "customer_id" in data:
        sale.customer = _resolve_ref(Customer, data["customer_id"], "Customer")
    if data.get("sale_date"):
        sale.sale_date = data["sale_date"]
    if data.get("sale_type"):
        sale.sale_type = data["sale_type"]
    if "remarks" in data:
        sale.remarks = (
            attach_note(data["remarks"], sale.voucher_no)
            if sale.voucher_no
            else (data["remarks"] or "")
        )

    for field, value in amounts.items():
        setattr(sale, field, value)
    sale.bank = primary_bank
    sale.net_sales = compute_net_sales(
        cash=sale.cash_amount,
        bank=sale.bank_amount,
        credit=sale.credit_amount,
        discount=sale.discount,
        returns=sale.returns_amount,
    )

    # reverse, then re-apply
    sale.bank_splits.all().delete()
    removed = bank_ledger.delete_sale_deposits(sale.id)

    sale.save()
    deposits = _write_bank_legs(sale, legs)

    logger.info(
        "Sale edited",
        extra={
            "sale_id": sale.id,
            "net_sales": str(sale.net_sales),
            "deposits_removed": removed,
            "deposits": deposits,
        },
    )
    return sale


@transaction.atomic
def delete_sale(*, sale_id) -> None:
    """
    Removes the sale with its receivables, their recoveries and its
    attachments. Bank deposits tagged to the sale are left in place.
    """
    sale = get_sale(sale_id, for_update=True)
    sale_lifecycle.ensure_mutable(sale)

    receivables_deleted = receivables_ledger.delete_for_sale(sale.id)

    paths = list(sale.attachments.values_list("path", flat=True))
    sale.attachments.all().delete()
    sale.delete()

    transaction.on_commit(lambda: _delete_files(paths))

    logger.info(
        "Sale deleted",
        extra={
            "sale_id": sale_id,
            "receivables_deleted": receivables_deleted,
            "attachments_deleted": len(paths),
        },
    )


@transaction.atomic
def lock_sale(*, sale_id, lock: bool = True) -> Sale:
    """
    Locking is one-way. Re-locking is a no-op; unlocking is rejected.
    """
    sale = get_sale(sale_id, for_update=True)

    if not lock:
        if sale.is_locked:
            sale_lifecycle.validate_transition(
                sale=sale, target_state=sale_lifecycle.STATE_OPEN
            )
        return sale

    if sale.is_locked:
        return sale

    sale_lifecycle.validate_transition(sale=sale, target_state=sale_lifecycle.STATE_LOCKED)
    sale.is_locked = True
    sale.save(update_fields=["is_locked", "updated_at"])

    logger.info("Sale locked", extra={"sale_id": sale.id})
    return sale


# ============================================================
# ATTACHMENTS
# ============================================================

_UNSAFE_NAME = re.compile(r"[^a-zA-Z0-9._-]")


def _storage_name(filename: str) -> str:
    safe = _UNSAFE_NAME.sub("_", filename or "file")
    return f"{ATTACHMENT_DIR}/{int(time.time() * 1000)}_{safe}"


def _delete_files(paths):
    for path in paths:
        if path and default_storage.exists(path):
            default_storage.delete(path)


@transaction.atomic
def add_attachments(*, sale_id, files) -> list[SaleAttachment]:
    sale = get_sale(sale_id)

    files = list(files or [])
    if not files:
        raise LedgerValidationError("No files uploaded.")
    if len(files) > ATTACHMENT_MAX_FILES:
        raise LedgerValidationError(
            f"At most {ATTACHMENT_MAX_FILES} files per upload."
        )
    for f in files:
        if f.size > ATTACHMENT_MAX_BYTES:
            raise LedgerValidationError(f"{f.name} exceeds the 10 MB limit.")

    saved = []
    for f in files:
        path = default_storage.save(_storage_name(f.name), f)
        saved.append(SaleAttachment.objects.create(sale=sale, filename=f.name, path=path))
    return saved


@transaction.atomic
def remove_attachment(*, sale_id, attachment_id) -> None:
    attachment = SaleAttachment.objects.filter(id=attachment_id, sale_id=sale_id).first()
    if attachment is None:
        raise LedgerNotFoundError("Attachment not found.")

    path = attachment.path
    attachment.delete()
    transaction.on_commit(lambda: _delete_files([path]))
