# core/api/pagination.py

"""
Limit/offset paging for the ledger list endpoints.

    ?limit=<n>&offset=<m>  ->  {count, next, previous, results}

limit defaults to LEDGER_LIST_LIMIT_DEFAULT and is capped at
LEDGER_LIST_LIMIT_MAX.
"""

from django.conf import settings
from rest_framework.pagination import LimitOffsetPagination


class LedgerPagination(LimitOffsetPagination):
    default_limit = settings.LEDGER_LIST_LIMIT_DEFAULT
    max_limit = settings.LEDGER_LIST_LIMIT_MAX
