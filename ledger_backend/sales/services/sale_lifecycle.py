"""
SALE LOCK RULES

A sale is either open or locked:

    open   -> locked
    locked    (terminal)

Locked sales reject edit, delete and unlock.

DESIGN PRINCIPLES:
- No database writes
- Single source of truth
"""

from core.services.exceptions import InvalidTransitionError, LockedResourceError
from sales.models import Sale

# ============================================================
# STATE DEFINITIONS
# ============================================================

STATE_OPEN = "open"
STATE_LOCKED = "locked"

TERMINAL_STATES = {
    STATE_LOCKED,
}

ALLOWED_TRANSITIONS = {
    STATE_OPEN: {
        STATE_LOCKED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def state_of(sale: Sale) -> str:
    return STATE_LOCKED if sale.is_locked else STATE_OPEN


def can_transition(*, from_state: str, to_state: str) -> bool:
    if from_state in TERMINAL_STATES:
        return False

    return to_state in ALLOWED_TRANSITIONS.get(from_state, set())


def validate_transition(*, sale: Sale, target_state: str):
    current = state_of(sale)
    if not can_transition(from_state=current, to_state=target_state):
        raise InvalidTransitionError(
            f"Sale {sale.id} cannot transition from '{current}' to '{target_state}'"
        )


def ensure_mutable(sale: Sale):
    if sale.is_locked:
        raise LockedResourceError(f"Sale {sale.id} is locked.")
