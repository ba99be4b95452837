from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from core.models import Branch, Customer
from core.services.exceptions import (
    InvalidTransitionError,
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from receivables.models import Receivable, ReceivableRecovery
from receivables.services import customer_ledger, receivables_ledger
from receivables.services.receivable_lifecycle import apply_recovery, can_transition

User = get_user_model()


class ReceivableLifecycleTests(TestCase):
    """
    GUARANTEES:
    - pending -> partial -> recovered
    - recovered is terminal
    - status == recovered  <=>  amount == 0
    """

    def setUp(self):
        self.customer = Customer.objects.create(name="Acme")
        self.receivable = receivables_ledger.create_standalone(
            customer_id=self.customer.id, amount="300.00"
        )

    def test_new_receivable_is_pending(self):
        self.assertEqual(self.receivable.status, Receivable.STATUS_PENDING)
        self.assertEqual(self.receivable.amount, Decimal("300.00"))
        self.assertEqual(self.receivable.original_amount, Decimal("300.00"))

    def test_recoveries_summing_to_original_reach_recovered_once(self):
        statuses = []
        for amount in ("100", "150", "50"):
            receivables_ledger.recover(receivable_id=self.receivable.id, amount=amount)
            self.receivable.refresh_from_db()
            statuses.append(self.receivable.status)

        self.assertEqual(
            statuses,
            [
                Receivable.STATUS_PARTIAL,
                Receivable.STATUS_PARTIAL,
                Receivable.STATUS_RECOVERED,
            ],
        )
        self.assertEqual(self.receivable.amount, Decimal("0.00"))
        self.assertEqual(self.receivable.recoveries.count(), 3)

    def test_full_recovery_in_one_step(self):
        receivables_ledger.recover(receivable_id=self.receivable.id, amount="300")
        self.receivable.refresh_from_db()
        self.assertEqual(self.receivable.status, Receivable.STATUS_RECOVERED)

    def test_recovery_cannot_exceed_due(self):
        with self.assertRaises(LedgerConflictError):
            receivables_ledger.recover(receivable_id=self.receivable.id, amount="300.01")

        self.receivable.refresh_from_db()
        self.assertEqual(self.receivable.amount, Decimal("300.00"))
        self.assertEqual(ReceivableRecovery.objects.count(), 0)

    def test_recovery_requires_positive_amount(self):
        with self.assertRaises(LedgerValidationError):
            receivables_ledger.recover(receivable_id=self.receivable.id, amount="0")

    def test_unknown_receivable_is_not_found(self):
        with self.assertRaises(LedgerNotFoundError):
            receivables_ledger.recover(receivable_id=9999, amount="1")

    def test_recovered_is_terminal(self):
        self.assertFalse(
            can_transition(
                from_status=Receivable.STATUS_RECOVERED,
                to_status=Receivable.STATUS_PARTIAL,
            )
        )
        self.receivable.status = Receivable.STATUS_RECOVERED
        with self.assertRaises(InvalidTransitionError):
            apply_recovery(receivable=self.receivable, remaining=Decimal("0.00"))

    def test_recovery_remarks_are_voucher_tagged(self):
        recovery = receivables_ledger.recover(
            receivable_id=self.receivable.id, amount="10", remarks="cash at counter"
        )
        self.assertRegex(recovery.remarks, r"^VCH-\d{6} - cash at counter$")

    def test_long_recovery_remarks_keep_full_text(self):
        remarks = "x" * 300
        recovery = receivables_ledger.recover(
            receivable_id=self.receivable.id, amount="10", remarks=remarks
        )
        recovery.refresh_from_db()
        self.assertTrue(recovery.remarks.endswith(remarks))
        self.assertTrue(recovery.remarks.startswith("VCH-"))


class CustomerLedgerTests(TestCase):
    def setUp(self):
        self.branch = Branch.objects.create(name="Downtown")
        self.customer = Customer.objects.create(name="Acme")

    def test_entries_and_running_balance(self):
        first = receivables_ledger.create_standalone(
            customer_id=self.customer.id, branch_id=self.branch.id, amount="200"
        )
        receivables_ledger.recover(receivable_id=first.id, amount="50")
        receivables_ledger.create_standalone(customer_id=self.customer.id, amount="100")

        ledger = customer_ledger.customer_ledger(customer_id=self.customer.id)

        self.assertEqual(
            [e["type"] for e in ledger["entries"]],
            ["receivable", "recovery", "receivable"],
        )
        self.assertEqual(
            [e["balance"] for e in ledger["entries"]],
            [Decimal("200.00"), Decimal("150.00"), Decimal("250.00")],
        )
        self.assertEqual(ledger["totalDue"], Decimal("250.00"))
        self.assertEqual(ledger["recoveredTotal"], Decimal("50.00"))
        self.assertEqual(ledger["entries"][0]["description"], f"Receivable #{first.id} (Downtown)")

        by_branch = customer_ledger.branch_ledger(branch_id=self.branch.id)
        self.assertEqual(by_branch["totalDue"], Decimal("150.00"))

    def test_overdue_lists_pending_past_due(self):
        today = timezone.localdate()
        late = receivables_ledger.create_standalone(
            customer_id=self.customer.id, amount="10", due_date=today - timedelta(days=1)
        )
        receivables_ledger.create_standalone(
            customer_id=self.customer.id, amount="10", due_date=today + timedelta(days=1)
        )
        self.assertEqual([r.id for r in customer_ledger.overdue(today=today)], [late.id])

    def test_customers_with_balance(self):
        receivables_ledger.create_standalone(customer_id=self.customer.id, amount="75")
        Customer.objects.create(name="Zeta")

        rows = {c.name: c.total_due for c in customer_ledger.customers_with_balance()}
        self.assertEqual(rows["Acme"], Decimal("75.00"))
        self.assertEqual(rows["Zeta"], Decimal("0.00"))


class ReceivableApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(User.objects.create_user(username="finance"))
        self.customer = Customer.objects.create(name="Acme")

    def test_create_and_recover(self):
        created = self.client.post(
            "/api/receivables/",
            {"customer_id": self.customer.id, "amount": "120.00", "due_date": "2024-05-01"},
            format="json",
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.data["status"], "pending")

        response = self.client.post(
            f"/api/receivables/{created.data['id']}/recover/",
            {"amount": "20.00"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"ok": True, "remaining": "100.00", "status": "partial"})

    def test_recover_missing_receivable_returns_404(self):
        response = self.client.post(
            "/api/receivables/9999/recover/", {"amount": "1"}, format="json"
        )
        self.assertEqual(response.status_code, 404)

    def test_patch_due_date(self):
        receivable = receivables_ledger.create_standalone(
            customer_id=self.customer.id, amount="5"
        )
        response = self.client.patch(
            f"/api/receivables/{receivable.id}/",
            {"due_date": "2024-06-30"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        receivable.refresh_from_db()
        self.assertEqual(receivable.due_date, date(2024, 6, 30))
