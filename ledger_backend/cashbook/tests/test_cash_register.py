from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from cashbook.models import CashEntry
from cashbook.services import cash_register
from core.models import Branch
from core.services.exceptions import LedgerConflictError, LedgerNotFoundError

User = get_user_model()

DAY = date(2024, 3, 1)


class CashRegisterTests(TestCase):
    def setUp(self):
        self.branch = Branch.objects.create(name="Downtown")

    def _create(self, **overrides):
        values = dict(
            branch_id=self.branch.id,
            entry_date=DAY,
            opening_cash="1000",
            sales_cash="500",
            expense_cash="200",
            bank_deposit="300",
            bank_withdrawal="0",
            closing_cash="900",
        )
        values.update(overrides)
        return cash_register.create_entry(**values)

    def test_expected_closing_and_difference(self):
        entry = self._create()

        self.assertEqual(entry.expected_closing, Decimal("1000.00"))
        self.assertEqual(entry.difference, Decimal("-100.00"))
        self.assertEqual(entry.closing_cash, Decimal("900.00"))
        self.assertTrue(entry.remarks.startswith("VCH-"))

    def test_missing_closing_defaults_to_expected(self):
        entry = self._create(closing_cash=None)

        self.assertEqual(entry.closing_cash, Decimal("1000.00"))
        self.assertEqual(entry.difference, Decimal("0.00"))

    def test_duplicate_branch_and_date_is_a_conflict(self):
        self._create()
        with self.assertRaises(LedgerConflictError):
            self._create(opening_cash="5")

        self.assertEqual(CashEntry.objects.count(), 1)
        self.assertEqual(CashEntry.objects.get().opening_cash, Decimal("1000.00"))

    def test_update_recomputes_difference(self):
        self._create()
        entry = cash_register.update_entry(
            branch_id=self.branch.id,
            entry_date=DAY,
            data={"bank_deposit": "200", "closing_cash": "1100"},
        )

        self.assertEqual(entry.expected_closing, Decimal("1100.00"))
        self.assertEqual(entry.difference, Decimal("0.00"))

    def test_update_missing_entry_is_not_found(self):
        with self.assertRaises(LedgerNotFoundError):
            cash_register.update_entry(
                branch_id=self.branch.id, entry_date=DAY, data={}
            )

    def test_difference_alerts_sorted_by_absolute_difference(self):
        other = Branch.objects.create(name="Uptown")
        quiet = Branch.objects.create(name="Harbor")
        self._create()  # -100
        self._create(branch_id=other.id, closing_cash="1250")  # +250
        self._create(branch_id=quiet.id, closing_cash=None)  # balanced

        alerts = cash_register.difference_alerts(day=DAY)["rows"]
        self.assertEqual([a.branch_id for a in alerts], [other.id, self.branch.id])

        summary = cash_register.branch_summary(day=DAY)
        self.assertEqual(summary["totalOpening"], Decimal("3000.00"))
        self.assertEqual(summary["totalClosing"], Decimal("3150.00"))


class CashEntryApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(User.objects.create_user(username="clerk"))
        self.branch = Branch.objects.create(name="Downtown")
        self.payload = {
            "branch_id": self.branch.id,
            "entry_date": "2024-03-01",
            "opening_cash": "1000",
            "sales_cash": "500",
            "expense_cash": "200",
            "bank_deposit": "300",
            "bank_withdrawal": "0",
            "closing_cash": "900",
        }

    def test_create_returns_expected_and_difference(self):
        response = self.client.post("/api/cash/entries/", self.payload, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(Decimal(response.data["expectedClosing"]), Decimal("1000"))
        self.assertEqual(Decimal(response.data["difference"]), Decimal("-100"))

    def test_duplicate_returns_400(self):
        self.client.post("/api/cash/entries/", self.payload, format="json")
        response = self.client.post("/api/cash/entries/", self.payload, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "conflict")

    def test_get_by_branch_and_date(self):
        self.client.post("/api/cash/entries/", self.payload, format="json")
        response = self.client.get(f"/api/cash/entries/{self.branch.id}/2024-03-01/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["branch_name"], "Downtown")

        missing = self.client.get(f"/api/cash/entries/{self.branch.id}/2024-03-02/")
        self.assertEqual(missing.status_code, 404)
