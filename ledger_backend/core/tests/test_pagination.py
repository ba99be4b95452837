from django.conf import settings
from django.test import SimpleTestCase
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from core.api.pagination import LedgerPagination


class LedgerPaginationTests(SimpleTestCase):
    def _limit(self, **params):
        request = Request(APIRequestFactory().get("/api/sales/", params))
        return LedgerPagination().get_limit(request)

    def test_default_limit(self):
        self.assertEqual(self._limit(), settings.LEDGER_LIST_LIMIT_DEFAULT)

    def test_limit_is_capped(self):
        self.assertEqual(self._limit(limit=100000), settings.LEDGER_LIST_LIMIT_MAX)

    def test_explicit_limit(self):
        self.assertEqual(self._limit(limit=25), 25)
