"""
RECEIVABLE LIFECYCLE DOMAIN RULES

The ONLY allowed status moves for a Receivable:

    pending  -> partial | recovered
    partial  -> partial | recovered
    recovered   (terminal)

DESIGN PRINCIPLES:
- No database writes
- Status is decided from the remaining amount, never assigned freely
"""

from decimal import Decimal

from core.services.exceptions import InvalidTransitionError
from receivables.models import Receivable

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Receivable.STATUS_RECOVERED,
}

ALLOWED_TRANSITIONS = {
    Receivable.STATUS_PENDING: {
        Receivable.STATUS_PARTIAL,
        Receivable.STATUS_RECOVERED,
    },
    Receivable.STATUS_PARTIAL: {
        Receivable.STATUS_PARTIAL,
        Receivable.STATUS_RECOVERED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def status_after_recovery(remaining: Decimal) -> str:
    if remaining <= Decimal("0.00"):
        return Receivable.STATUS_RECOVERED
    return Receivable.STATUS_PARTIAL


def apply_recovery(*, receivable: Receivable, remaining: Decimal) -> str:
    """
    Move `receivable` to the status implied by `remaining` (in memory).
    """
    target = status_after_recovery(remaining)
    if not can_transition(from_status=receivable.status, to_status=target):
        raise InvalidTransitionError(
            f"Receivable {receivable.id} cannot transition from "
            f"'{receivable.status}' to '{target}'"
        )

    receivable.amount = max(Decimal("0.00"), remaining)
    receivable.status = target
    return target
