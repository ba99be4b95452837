# core/api/params.py

"""
Query-string helpers shared by the ledger list/report endpoints.
"""

from __future__ import annotations

from datetime import date

from django.utils.dateparse import parse_date
from rest_framework.exceptions import ValidationError


def query_date(request, name: str, *, required: bool = False) -> date | None:
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        if required:
            raise ValidationError({name: "This query parameter is required (YYYY-MM-DD)."})
        return None

    try:
        parsed = parse_date(raw)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError({name: "Invalid date. Use YYYY-MM-DD."})
    return parsed


def query_int(request, name: str) -> int | None:
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError({name: "Must be an integer."}) from exc
