# core/services/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors for every ledger service.

Each error carries a category `code`; the API layer maps it to an HTTP
status (see core.api.errors). Database failures are NOT wrapped here.
"""


class LedgerError(Exception):
    """Base exception for all ledger service failures."""

    code = "error"


class LedgerValidationError(LedgerError):
    """Malformed or out-of-range input (non-positive amount, unknown type, ...)."""

    code = "validation"


class LedgerNotFoundError(LedgerError):
    """A referenced entity does not exist."""

    code = "not_found"


class LedgerConflictError(LedgerError):
    """The request is well-formed but contradicts current state."""

    code = "conflict"


class LockedResourceError(LedgerError):
    """The target record is locked against edits and deletion."""

    code = "locked"


class InvalidTransitionError(LedgerConflictError):
    """A status change not allowed by the entity's lifecycle."""
