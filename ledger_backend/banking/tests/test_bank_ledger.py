from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from banking.models import Bank, BankTransaction
from banking.services import bank_ledger
from core.services.exceptions import LedgerNotFoundError, LedgerValidationError

User = get_user_model()


class BankBalanceTests(TestCase):
    def setUp(self):
        self.bank = Bank.objects.create(name="Main", opening_balance="1000.00")

    def _tx(self, type, amount, day=date(2024, 1, 1)):
        return BankTransaction.objects.create(
            bank=self.bank, type=type, amount=amount, transaction_date=day
        )

    def test_balance_without_transactions_is_opening_balance(self):
        self.assertEqual(bank_ledger.current_balance(self.bank), Decimal("1000.00"))

    def test_balance_applies_credit_and_debit_types(self):
        self._tx(BankTransaction.TYPE_DEPOSIT, "500.00")
        self._tx(BankTransaction.TYPE_TRANSFER_IN, "100.00")
        self._tx(BankTransaction.TYPE_WITHDRAWAL, "50.00")
        self._tx(BankTransaction.TYPE_PAYMENT, "25.00")
        self._tx(BankTransaction.TYPE_TRANSFER_OUT, "25.00")

        self.assertEqual(bank_ledger.current_balance(self.bank), Decimal("1500.00"))
        annotated = bank_ledger.with_balances().get(id=self.bank.id)
        self.assertEqual(annotated.current_balance, Decimal("1500.00"))

    def test_record_transaction_rejects_bad_input(self):
        with self.assertRaises(LedgerValidationError):
            bank_ledger.record_transaction(
                bank_id=self.bank.id, type="deposit", amount="0"
            )
        with self.assertRaises(LedgerValidationError):
            bank_ledger.record_transaction(
                bank_id=self.bank.id, type="refund", amount="10"
            )
        with self.assertRaises(LedgerNotFoundError):
            bank_ledger.record_transaction(bank_id=9999, type="deposit", amount="10")

    def test_record_transaction_rejects_overlong_reference(self):
        with self.assertRaises(LedgerValidationError):
            bank_ledger.record_transaction(
                bank_id=self.bank.id, type="deposit", amount="10", reference="r" * 256
            )

    def test_long_description_is_stored_in_full(self):
        tx = bank_ledger.record_transaction(
            bank_id=self.bank.id, type="deposit", amount="10", description="d" * 400
        )
        tx.refresh_from_db()
        self.assertEqual(len(tx.description), 400)


class BankTransferTests(TestCase):
    def setUp(self):
        self.a = Bank.objects.create(name="A", opening_balance="1000.00")
        self.b = Bank.objects.create(name="B", opening_balance="0.00")

    def test_transfer_moves_money_under_one_voucher(self):
        result = bank_ledger.transfer(
            from_bank_id=self.a.id, to_bank_id=self.b.id, amount="300"
        )

        self.assertEqual(bank_ledger.current_balance(self.a), Decimal("700.00"))
        self.assertEqual(bank_ledger.current_balance(self.b), Decimal("300.00"))

        out_leg = BankTransaction.objects.get(id=result["out_transaction_id"])
        in_leg = BankTransaction.objects.get(id=result["in_transaction_id"])
        voucher = result["voucher_no"]
        self.assertEqual(out_leg.reference, f"{voucher} - transfer-to-{self.b.id}")
        self.assertEqual(in_leg.reference, f"{voucher} - transfer-from-{self.a.id}")
        self.assertEqual(out_leg.description, "Bank transfer")

    def test_transfer_to_same_bank_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            bank_ledger.transfer(
                from_bank_id=self.a.id, to_bank_id=self.a.id, amount="10"
            )
        self.assertEqual(BankTransaction.objects.count(), 0)

    def test_transfer_of_zero_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            bank_ledger.transfer(from_bank_id=self.a.id, to_bank_id=self.b.id, amount=0)


class BankReconciliationTests(TestCase):
    def test_running_balance_and_columns(self):
        bank = Bank.objects.create(name="Main", opening_balance="100.00")
        BankTransaction.objects.create(
            bank=bank, type="deposit", amount="50.00", transaction_date=date(2024, 1, 1)
        )
        BankTransaction.objects.create(
            bank=bank, type="payment", amount="30.00", transaction_date=date(2024, 1, 5)
        )
        BankTransaction.objects.create(
            bank=bank, type="deposit", amount="10.00", transaction_date=date(2024, 2, 1)
        )

        full = bank_ledger.reconciliation(bank_id=bank.id)
        self.assertEqual(
            [r["balance"] for r in full["statement"]],
            [Decimal("150.00"), Decimal("120.00"), Decimal("130.00")],
        )
        self.assertEqual(full["statement"][1]["debit"], Decimal("30.00"))
        self.assertEqual(full["statement"][1]["credit"], Decimal("0.00"))
        self.assertEqual(full["calculated_balance"], Decimal("130.00"))

        window = bank_ledger.reconciliation(bank_id=bank.id, date_from=date(2024, 1, 3))
        self.assertEqual(window["starting_balance"], Decimal("150.00"))
        self.assertEqual(window["calculated_balance"], Decimal("130.00"))


class BankApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="finance", password="pass")
        self.client.force_authenticate(self.user)
        self.bank = Bank.objects.create(name="Main", opening_balance="200.00")

    def test_requires_authentication(self):
        anon = APIClient()
        response = anon.get("/api/banking/banks/")
        self.assertEqual(response.status_code, 401)

    def test_list_includes_current_balance(self):
        BankTransaction.objects.create(bank=self.bank, type="deposit", amount="50.00")
        response = self.client.get("/api/banking/banks/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Decimal(response.data[0]["current_balance"]), Decimal("250.00"))

    def test_manual_transaction_is_voucher_tagged(self):
        response = self.client.post(
            f"/api/banking/banks/{self.bank.id}/transactions/",
            {"type": "withdrawal", "amount": "20.00", "reference": "petty cash"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["balance"], "180.00")
        self.assertTrue(response.data["reference"].startswith("VCH-"))
        self.assertTrue(response.data["reference"].endswith(" - petty cash"))

    def test_overlong_manual_reference_returns_400(self):
        response = self.client.post(
            f"/api/banking/banks/{self.bank.id}/transactions/",
            {"type": "deposit", "amount": "20.00", "reference": "r" * 201},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(BankTransaction.objects.filter(bank=self.bank).exists())

    def test_unknown_bank_returns_404(self):
        response = self.client.post(
            "/api/banking/banks/9999/transactions/",
            {"type": "deposit", "amount": "20.00"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "not_found")

    def test_invalid_transfer_returns_400(self):
        response = self.client.post(
            "/api/banking/transfer/",
            {"from_bank_id": self.bank.id, "to_bank_id": self.bank.id, "amount": "5"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["detail"], "Invalid transfer.")
