"""
BILL / SALARY PAYMENT LIFECYCLE

Shared by RentBill and SalaryRecord (same three states):

    pending  -> partial | paid
    partial  -> partial | paid
    paid        (terminal)

- No database writes
- Status follows from (paid, due); callers never assign it freely
"""

from decimal import Decimal

from core.services.exceptions import InvalidTransitionError

STATUS_PENDING = "pending"
STATUS_PARTIAL = "partial"
STATUS_PAID = "paid"

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    STATUS_PAID,
}

ALLOWED_TRANSITIONS = {
    STATUS_PENDING: {
        STATUS_PARTIAL,
        STATUS_PAID,
    },
    STATUS_PARTIAL: {
        STATUS_PARTIAL,
        STATUS_PAID,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def status_for(*, paid: Decimal, due: Decimal) -> str:
    if paid >= due:
        return STATUS_PAID
    if paid > Decimal("0.00"):
        return STATUS_PARTIAL
    return STATUS_PENDING


def apply_payment_status(obj, *, paid: Decimal, due: Decimal) -> str:
    """
    Set obj.status for a payment that brings the paid total to `paid`.
    """
    target = status_for(paid=paid, due=due)
    if not can_transition(from_status=obj.status, to_status=target):
        raise InvalidTransitionError(
            f"{obj.__class__.__name__} {obj.pk} cannot transition from "
            f"'{obj.status}' to '{target}'"
        )

    obj.status = target
    return target
