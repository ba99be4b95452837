# banking/services/bank_ledger.py

"""
======================================================
BANK LEDGER
======================================================

Balances are DERIVED, never stored:

    balance = opening_balance
              + Σ amount where type ∈ {deposit, transfer_in}
              − Σ amount where type ∈ {withdrawal, payment, transfer_out}

RULES:
- Every movement is a BankTransaction row with amount > 0
- A transfer is exactly two rows (transfer_out + transfer_in) sharing one voucher
- Sale deposits carry reference "sale-<id>" so sale edits can replace them
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import DecimalField, F, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from banking.models import Bank, BankTransaction
from core.services.exceptions import LedgerNotFoundError, LedgerValidationError
from core.services.numbering import attach_note, next_voucher

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# BankTransaction.reference column width
REFERENCE_MAX_LENGTH = 255


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _zero():
    return Value(ZERO, output_field=DecimalField(max_digits=14, decimal_places=2))


def _sum_of(types, prefix: str = ""):
    return Coalesce(
        Sum(f"{prefix}amount", filter=Q(**{f"{prefix}type__in": types})),
        _zero(),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


def sale_reference(sale_id) -> str:
    return f"sale-{sale_id}"


# ============================================================
# LOOKUPS
# ============================================================


def get_bank(bank_id) -> Bank:
    try:
        return Bank.objects.get(id=bank_id)
    except (Bank.DoesNotExist, ValueError, TypeError) as exc:
        raise LedgerNotFoundError("Bank account not found.") from exc


def with_balances(queryset=None):
    """
    Annotate banks with `current_balance` (one aggregate per bank, no N+1).
    """
    qs = Bank.objects.all() if queryset is None else queryset
    return qs.annotate(
        _credits=_sum_of(BankTransaction.CREDIT_TYPES, prefix="transactions__"),
        _debits=_sum_of(BankTransaction.DEBIT_TYPES, prefix="transactions__"),
    ).annotate(
        current_balance=F("opening_balance") + F("_credits") - F("_debits"),
    )


def movement_total(transactions) -> Decimal:
    totals = transactions.aggregate(
        credits=_sum_of(BankTransaction.CREDIT_TYPES),
        debits=_sum_of(BankTransaction.DEBIT_TYPES),
    )
    return _money(totals["credits"]) - _money(totals["debits"])


def current_balance(bank) -> Decimal:
    if not isinstance(bank, Bank):
        bank = get_bank(bank)
    return _money(bank.opening_balance) + movement_total(
        BankTransaction.objects.filter(bank=bank)
    )


# ============================================================
# WRITES
# ============================================================


def record_transaction(
    *,
    bank_id,
    type: str,
    amount,
    transaction_date=None,
    reference: str = "",
    description: str = "",
) -> BankTransaction:
    """
    Append one movement. Callers that own a larger unit of work call this
    inside their own transaction.atomic block.
    """
    amt = _money(amount)
    if amt <= ZERO:
        raise LedgerValidationError("Amount must be greater than zero.")

    valid_types = {choice for choice, _ in BankTransaction.TYPE_CHOICES}
    if type not in valid_types:
        raise LedgerValidationError(
            f"Invalid transaction type. Use one of: {', '.join(sorted(valid_types))}."
        )

    if len(reference or "") > REFERENCE_MAX_LENGTH:
        raise LedgerValidationError(
            f"Reference cannot exceed {REFERENCE_MAX_LENGTH} characters."
        )

    bank = get_bank(bank_id)

    return BankTransaction.objects.create(
        bank=bank,
        type=type,
        amount=amt,
        transaction_date=transaction_date or timezone.localdate(),
        reference=reference or "",
        description=description or "",
    )


@transaction.atomic
def post_manual_transaction(
    *,
    bank_id,
    type: str,
    amount,
    transaction_date=None,
    reference: str = "",
    description: str = "",
):
    """
    Operator-entered movement: issues a voucher and tags the reference.
    Returns (transaction, new balance).
    """
    get_bank(bank_id)
    voucher = next_voucher()

    tx = record_transaction(
        bank_id=bank_id,
        type=type,
        amount=amount,
        transaction_date=transaction_date,
        reference=attach_note(reference, voucher),
        description=description,
    )

    logger.info(
        "Bank transaction recorded",
        extra={"bank_id": tx.bank_id, "type": tx.type, "voucher": voucher},
    )
    return tx, current_balance(tx.bank)


@transaction.atomic
def transfer(
    *,
    from_bank_id,
    to_bank_id,
    amount,
    transaction_date=None,
    description: str = "",
) -> dict:
    amt = _money(amount)
    if amt <= ZERO or str(from_bank_id) == str(to_bank_id):
        raise LedgerValidationError("Invalid transfer.")

    source = get_bank(from_bank_id)
    target = get_bank(to_bank_id)

    voucher = next_voucher()
    tx_date = transaction_date or timezone.localdate()
    desc = (description or "").strip() or "Bank transfer"

    out_leg = record_transaction(
        bank_id=source.id,
        type=BankTransaction.TYPE_TRANSFER_OUT,
        amount=amt,
        transaction_date=tx_date,
        reference=attach_note(f"transfer-to-{target.id}", voucher),
        description=desc,
    )
    in_leg = record_transaction(
        bank_id=target.id,
        type=BankTransaction.TYPE_TRANSFER_IN,
        amount=amt,
        transaction_date=tx_date,
        reference=attach_note(f"transfer-from-{source.id}", voucher),
        description=desc,
    )

    logger.info(
        "Bank transfer completed",
        extra={
            "from_bank_id": source.id,
            "to_bank_id": target.id,
            "amount": str(amt),
            "voucher": voucher,
        },
    )

    return {
        "voucher_no": voucher,
        "amount": amt,
        "out_transaction_id": out_leg.id,
        "in_transaction_id": in_leg.id,
    }


def delete_sale_deposits(sale_id) -> int:
    deleted, _ = BankTransaction.objects.filter(
        reference=sale_reference(sale_id),
        type=BankTransaction.TYPE_DEPOSIT,
    ).delete()
    return deleted


# ============================================================
# READS
# ============================================================


def _in_range(qs, date_from=None, date_to=None):
    if date_from:
        qs = qs.filter(transaction_date__gte=date_from)
    if date_to:
        qs = qs.filter(transaction_date__lte=date_to)
    return qs


def statement(*, bank_id, date_from=None, date_to=None):
    """
    Newest first.
    """
    bank = get_bank(bank_id)
    qs = _in_range(
        BankTransaction.objects.filter(bank=bank), date_from, date_to
    ).order_by("-transaction_date", "-id")
    return bank, list(qs), current_balance(bank)


def reconciliation(*, bank_id, date_from=None, date_to=None) -> dict:
    """
    Oldest first with debit/credit columns and a running balance.

    The running balance starts from the opening balance plus every
    movement dated before `date_from`.
    """
    bank = get_bank(bank_id)
    base = BankTransaction.objects.filter(bank=bank)

    starting = _money(bank.opening_balance)
    if date_from:
        starting += movement_total(base.filter(transaction_date__lt=date_from))

    running = starting
    rows = []
    for tx in _in_range(base, date_from, date_to).order_by("transaction_date", "id"):
        amt = _money(tx.amount)
        if tx.is_credit:
            running += amt
            debit, credit = ZERO, amt
        else:
            running -= amt
            debit, credit = amt, ZERO

        rows.append(
            {
                "id": tx.id,
                "transaction_date": tx.transaction_date,
                "type": tx.type,
                "reference": tx.reference,
                "description": tx.description,
                "debit": debit,
                "credit": credit,
                "balance": running,
            }
        )

    return {
        "bank": bank,
        "opening_balance": _money(bank.opening_balance),
        "starting_balance": starting,
        "calculated_balance": running,
        "statement": rows,
    }
