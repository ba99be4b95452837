# core/services/numbering.py

"""
VOUCHER / INVOICE NUMBERING

Every money movement carries a voucher: "<PREFIX>-<6-digit counter>".

RULES:
- The counter lives in SystemSetting and holds the NEXT number to issue
  (missing row or blank value => 1).
- Read + increment is one critical section: the UPDATE runs first and takes
  the write lock, so no two callers ever see the same value.
- The counter row is written inside the caller's transaction: a rolled-back
  operation rolls back its voucher number too.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Case, F, IntegerField, TextField, Value, When
from django.db.models.functions import Cast

from core.models import SystemSetting
from core.services.exceptions import LedgerConflictError

logger = logging.getLogger(__name__)

# blank or digits only
COUNTER_PATTERN = r"^[0-9]*$"


def _read_prefix(key: str, default: str) -> str:
    row = SystemSetting.objects.filter(key=key).only("value").first()
    prefix = (row.value if row else "").strip()
    return prefix or default


def _advance_counter(key: str) -> int:
    """
    Returns the number to issue and stores number + 1.

    A blank value counts as 1. A non-numeric value is never overwritten.
    """
    bump = Case(
        When(value="", then=Value("2")),
        default=Cast(
            Cast(F("value"), output_field=IntegerField()) + 1,
            output_field=TextField(),
        ),
        output_field=TextField(),
    )

    with transaction.atomic():
        while True:
            counter = SystemSetting.objects.filter(key=key)
            if counter.filter(value__regex=COUNTER_PATTERN).update(value=bump):
                stored = counter.get().value
                return int(stored) - 1

            current = counter.values_list("value", flat=True).first()
            if current is not None:
                raise LedgerConflictError(
                    f"Counter {key!r} holds a non-numeric value: {current!r}."
                )

            try:
                with transaction.atomic():
                    SystemSetting.objects.create(key=key, value="2")
                return 1
            except IntegrityError:
                # Another writer created the row first; bump theirs.
                continue


def next_voucher() -> str:
    prefix = _read_prefix(SystemSetting.VOUCHER_PREFIX, settings.LEDGER_VOUCHER_PREFIX)
    number = _advance_counter(SystemSetting.VOUCHER_COUNTER)
    voucher = f"{prefix}-{number:06d}"
    logger.debug("Voucher issued", extra={"voucher": voucher})
    return voucher


def next_invoice_number() -> str:
    prefix = _read_prefix(SystemSetting.INVOICE_PREFIX, settings.LEDGER_INVOICE_PREFIX)
    number = _advance_counter(SystemSetting.INVOICE_COUNTER)
    return f"{prefix}-{number:06d}"


def attach_note(free_text, voucher: str) -> str:
    """
    Prefix free text with the voucher unless it already mentions it.

    attach_note("", "VCH-000001")            -> "VCH-000001"
    attach_note("rent", "VCH-000001")        -> "VCH-000001 - rent"
    attach_note("VCH-000001 - rent", "VCH-000001") -> unchanged
    """
    text = str(free_text or "").strip()
    if not text:
        return voucher
    if voucher in text:
        return text
    return f"{voucher} - {text}"
