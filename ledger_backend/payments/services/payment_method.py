# payments/services/payment_method.py

"""
payment_method is either the literal "cash" or a bank id (int or numeric
string). Anything else is rejected.
"""

from __future__ import annotations

from banking.models import Bank
from banking.services.bank_ledger import get_bank
from core.services.exceptions import LedgerValidationError
from payments.models import Payment


def resolve_payment_method(payment_method):
    """
    Returns (mode, bank_or_None).
    """
    raw = str(payment_method if payment_method is not None else "").strip().lower()

    if not raw or raw == Payment.MODE_CASH:
        return Payment.MODE_CASH, None

    if not raw.isdigit():
        raise LedgerValidationError(
            "Invalid payment_method. Use 'cash' or a bank account id."
        )

    bank: Bank = get_bank(int(raw))
    return Payment.MODE_BANK, bank
