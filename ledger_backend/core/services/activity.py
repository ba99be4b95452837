# core/services/activity.py

"""
======================================================
ACTIVITY LOG
======================================================

Every successful write request by an authenticated user leaves one
ActivityLog row: who, what action, which module, which record.

Which requests count is declared per route below, keyed by
(url name, HTTP method). Routes that are not listed are not logged.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError, transaction

from core.models import ActivityLog

logger = logging.getLogger(__name__)


# (url_name, method) -> (action, module)
LOGGED_ROUTES = {
    ("core-branches", "POST"): ("create", "branches"),
    ("core-customers", "POST"): ("create", "customers"),
    ("core-customer-detail", "PATCH"): ("update", "customers"),
    ("banking-banks", "POST"): ("create", "banks"),
    ("banking-bank-detail", "PATCH"): ("update", "banks"),
    ("banking-bank-transactions", "POST"): ("bank_transaction", "banks"),
    ("banking-transfer", "POST"): ("transfer", "banks"),
    ("cash-entries", "POST"): ("create", "cash"),
    ("cash-entry-detail", "PATCH"): ("update", "cash"),
    ("sales", "POST"): ("create", "sales"),
    ("sale-detail", "PATCH"): ("update", "sales"),
    ("sale-detail", "DELETE"): ("delete", "sales"),
    ("sale-lock", "POST"): ("lock", "sales"),
    ("sale-attachments", "POST"): ("attach", "sales"),
    ("sale-attachment-delete", "DELETE"): ("delete_attachment", "sales"),
    ("receivables", "POST"): ("create", "receivables"),
    ("receivable-detail", "PATCH"): ("update", "receivables"),
    ("receivable-recover", "POST"): ("recovery", "receivables"),
    ("purchase-suppliers", "POST"): ("create", "suppliers"),
    ("purchase-supplier-detail", "PATCH"): ("update", "suppliers"),
    ("purchases", "POST"): ("create", "purchases"),
    ("purchase-detail", "PATCH"): ("update", "purchases"),
    ("purchase-pay", "POST"): ("payment", "purchases"),
    ("payments", "POST"): ("payment", "payments"),
    ("rent-bills", "POST"): ("create", "rent_bills"),
    ("staff", "POST"): ("create", "staff"),
    ("staff-salary", "POST"): ("salary", "staff"),
}


def route_activity(url_name, method: str):
    """(action, module) for a logged route, else None."""
    return LOGGED_ROUTES.get((url_name, (method or "").upper()))


def entity_ref_for(url_kwargs: dict, response_data) -> str:
    """
    The record a request touched: URL ids joined with "/", or the id of
    the created row when the URL carries none.
    """
    if url_kwargs:
        return "/".join(str(v) for v in url_kwargs.values())
    if isinstance(response_data, dict):
        created = response_data.get("id")
        if created is not None:
            return str(created)
    return ""


def log_activity(
    *, user, action: str, module: str, entity_ref="", details=""
) -> ActivityLog | None:
    """
    Anonymous callers are not logged. A failed insert is reported and
    never undoes the request that triggered it.
    """
    if not getattr(user, "is_authenticated", False):
        return None

    try:
        with transaction.atomic():
            return ActivityLog.objects.create(
                user=user,
                action=action,
                module=module,
                entity_ref=str(entity_ref or "")[:100],
                details=details or "",
            )
    except DatabaseError:
        logger.exception(
            "Activity log write failed",
            extra={"action": action, "module": module, "entity_ref": entity_ref},
        )
        return None


def activity_entries(*, module=None, user_id=None, date_from=None, date_to=None):
    qs = ActivityLog.objects.select_related("user")
    if module:
        qs = qs.filter(module=module)
    if user_id is not None:
        qs = qs.filter(user_id=user_id)
    if date_from:
        qs = qs.filter(created_at__date__gte=date_from)
    if date_to:
        qs = qs.filter(created_at__date__lte=date_to)
    return qs.order_by("-created_at", "-id")
