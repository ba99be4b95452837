# core/api/errors.py

"""
LEDGER ERROR -> HTTP RESPONSE

validation / conflict / locked -> 400
not_found                      -> 404
"""

from rest_framework import status
from rest_framework.response import Response

from core.services.exceptions import LedgerError, LedgerNotFoundError

STATUS_BY_ERROR = {
    LedgerNotFoundError: status.HTTP_404_NOT_FOUND,
}


def ledger_error_response(exc: LedgerError) -> Response:
    http_status = status.HTTP_400_BAD_REQUEST
    for error_class, mapped in STATUS_BY_ERROR.items():
        if isinstance(exc, error_class):
            http_status = mapped
            break

    return Response({"detail": str(exc), "code": exc.code}, status=http_status)
