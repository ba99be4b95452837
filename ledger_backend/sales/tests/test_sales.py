import shutil
import tempfile
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from banking.models import Bank, BankTransaction
from banking.services.bank_ledger import sale_reference
from core.models import Branch, Customer
from core.services.exceptions import (
    InvalidTransitionError,
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
    LockedResourceError,
)
from receivables.models import Receivable, ReceivableRecovery
from receivables.services import receivables_ledger
from sales.models import Sale, SaleAttachment, SaleBankSplit
from sales.services import sale_reports, sale_service
from sales.services.sale_math import compute_net_sales

User = get_user_model()


def _deposits(sale):
    return BankTransaction.objects.filter(
        reference=sale_reference(sale.id), type=BankTransaction.TYPE_DEPOSIT
    )


class NetSalesTests(TestCase):
    def test_formula(self):
        self.assertEqual(
            compute_net_sales(
                cash="100", bank="50", credit="25", discount="10", returns="5"
            ),
            Decimal("160.00"),
        )

    def test_floors_at_zero(self):
        self.assertEqual(
            compute_net_sales(cash="10", bank=0, credit=None, discount="50", returns=0),
            Decimal("0.00"),
        )


class RecordSaleTests(TestCase):
    """
    GUARANTEES:
    - net_sales == max(0, cash + bank + credit - discount - returns)
    - credit > 0 creates exactly one pending receivable
    - bank > 0 creates one deposit per bank leg referenced sale-<id>
    - any failure leaves no partial rows
    """

    def setUp(self):
        self.branch = Branch.objects.create(name="Main Street")
        self.customer = Customer.objects.create(name="Dana")
        self.bank_a = Bank.objects.create(name="Bank A")
        self.bank_b = Bank.objects.create(name="Bank B")

    def test_cash_only_sale(self):
        sale = sale_service.record_sale(
            data={"branch_id": self.branch.id, "cash_amount": "300", "discount": "20"}
        )
        self.assertEqual(sale.net_sales, Decimal("280.00"))
        self.assertTrue(sale.voucher_no)
        self.assertIn(sale.voucher_no, sale.remarks)
        self.assertFalse(_deposits(sale).exists())
        self.assertFalse(Receivable.objects.exists())

    def test_credit_sale_creates_receivable(self):
        sale = sale_service.record_sale(
            data={
                "branch_id": self.branch.id,
                "customer_id": self.customer.id,
                "credit_amount": "450",
                "due_date": date(2024, 2, 1),
            }
        )
        receivable = Receivable.objects.get(sale=sale)
        self.assertEqual(receivable.amount, Decimal("450.00"))
        self.assertEqual(receivable.status, Receivable.STATUS_PENDING)
        self.assertEqual(receivable.branch_id, self.branch.id)
        self.assertEqual(receivable.customer_id, self.customer.id)

    def test_single_bank_deposit(self):
        sale = sale_service.record_sale(
            data={
                "bank_amount": "500",
                "bank_id": self.bank_a.id,
                "sale_date": date(2024, 1, 5),
            }
        )
        tx = _deposits(sale).get()
        self.assertEqual(tx.bank_id, self.bank_a.id)
        self.assertEqual(tx.amount, Decimal("500.00"))
        self.assertEqual(tx.transaction_date, date(2024, 1, 5))
        self.assertEqual(sale.bank_id, self.bank_a.id)

    def test_splits_override_bank_amount_and_drop_invalid_legs(self):
        sale = sale_service.record_sale(
            data={
                "bank_amount": "999",
                "bank_splits": [
                    {"bank_id": self.bank_a.id, "amount": "200"},
                    {"bank_id": self.bank_b.id, "amount": "300"},
                    {"bank_id": self.bank_b.id, "amount": "0"},
                    {"bank_id": None, "amount": "50"},
                    {"bank_id": 424242, "amount": "70"},
                ],
            }
        )
        self.assertEqual(sale.bank_amount, Decimal("500.00"))
        self.assertEqual(sale.net_sales, Decimal("500.00"))
        self.assertEqual(sale.bank_id, self.bank_a.id)
        self.assertEqual(SaleBankSplit.objects.filter(sale=sale).count(), 2)
        self.assertEqual(_deposits(sale).count(), 2)

    def test_bank_amount_without_bank_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            sale_service.record_sale(data={"bank_amount": "100"})
        self.assertFalse(Sale.objects.exists())

    def test_unknown_bank_rolls_back_everything(self):
        with self.assertRaises(LedgerValidationError):
            sale_service.record_sale(
                data={"credit_amount": "100", "bank_amount": "100", "bank_id": 424242}
            )
        self.assertFalse(Sale.objects.exists())
        self.assertFalse(Receivable.objects.exists())
        self.assertFalse(BankTransaction.objects.exists())

    def test_unknown_branch_is_not_found(self):
        with self.assertRaises(LedgerNotFoundError):
            sale_service.record_sale(data={"branch_id": 9999, "cash_amount": "1"})

    def test_negative_amount_rejected(self):
        with self.assertRaises(LedgerValidationError):
            sale_service.record_sale(data={"cash_amount": "-5"})


class EditSaleTests(TestCase):
    def setUp(self):
        self.bank_a = Bank.objects.create(name="Bank A")
        self.bank_b = Bank.objects.create(name="Bank B")
        self.sale = sale_service.record_sale(
            data={"bank_amount": "500", "bank_id": self.bank_a.id, "cash_amount": "100"}
        )

    def test_single_deposit_becomes_two_way_split(self):
        sale_service.edit_sale(
            sale_id=self.sale.id,
            data={
                "bank_splits": [
                    {"bank_id": self.bank_a.id, "amount": "200"},
                    {"bank_id": self.bank_b.id, "amount": "300"},
                ]
            },
        )

        deposits = _deposits(self.sale)
        self.assertEqual(deposits.count(), 2)
        self.assertEqual(
            sorted((tx.bank_id, tx.amount) for tx in deposits),
            sorted(
                [(self.bank_a.id, Decimal("200.00")), (self.bank_b.id, Decimal("300.00"))]
            ),
        )
        self.assertEqual(BankTransaction.objects.count(), 2)

    def test_new_bank_amount_replaces_stored_splits(self):
        split_sale = sale_service.record_sale(
            data={
                "bank_splits": [
                    {"bank_id": self.bank_a.id, "amount": "200"},
                    {"bank_id": self.bank_b.id, "amount": "300"},
                ]
            }
        )

        sale = sale_service.edit_sale(
            sale_id=split_sale.id,
            data={"bank_amount": "800", "bank_id": self.bank_a.id},
        )

        self.assertEqual(sale.bank_amount, Decimal("800.00"))
        self.assertEqual(sale.net_sales, Decimal("800.00"))
        self.assertFalse(SaleBankSplit.objects.filter(sale=sale).exists())
        tx = _deposits(sale).get()
        self.assertEqual((tx.bank_id, tx.amount), (self.bank_a.id, Decimal("800.00")))

    def test_bank_amount_alone_keeps_primary_bank(self):
        split_sale = sale_service.record_sale(
            data={
                "bank_splits": [
                    {"bank_id": self.bank_b.id, "amount": "200"},
                    {"bank_id": self.bank_a.id, "amount": "300"},
                ]
            }
        )

        sale = sale_service.edit_sale(
            sale_id=split_sale.id, data={"bank_amount": "650"}
        )

        tx = _deposits(sale).get()
        self.assertEqual((tx.bank_id, tx.amount), (self.bank_b.id, Decimal("650.00")))

    def test_untouched_bank_fields_keep_stored_splits(self):
        split_sale = sale_service.record_sale(
            data={
                "bank_splits": [
                    {"bank_id": self.bank_a.id, "amount": "200"},
                    {"bank_id": self.bank_b.id, "amount": "300"},
                ]
            }
        )

        sale = sale_service.edit_sale(sale_id=split_sale.id, data={"cash_amount": "10"})

        self.assertEqual(sale.bank_amount, Decimal("500.00"))
        self.assertEqual(SaleBankSplit.objects.filter(sale=sale).count(), 2)
        self.assertEqual(_deposits(sale).count(), 2)

    def test_absent_fields_keep_stored_values(self):
        sale = sale_service.edit_sale(sale_id=self.sale.id, data={"discount": "50"})

        self.assertEqual(sale.cash_amount, Decimal("100.00"))
        self.assertEqual(sale.bank_amount, Decimal("500.00"))
        self.assertEqual(sale.net_sales, Decimal("550.00"))
        self.assertEqual(_deposits(sale).count(), 1)

    def test_clearing_bank_amount_removes_deposits(self):
        sale_service.edit_sale(sale_id=self.sale.id, data={"bank_amount": "0"})
        self.assertFalse(_deposits(self.sale).exists())

    def test_edit_preserves_voucher_in_remarks(self):
        sale = sale_service.edit_sale(sale_id=self.sale.id, data={"remarks": "recount"})
        self.assertEqual(sale.remarks, f"{sale.voucher_no} - recount")

    def test_locked_sale_rejects_edit(self):
        sale_service.lock_sale(sale_id=self.sale.id)
        with self.assertRaises(LockedResourceError):
            sale_service.edit_sale(sale_id=self.sale.id, data={"cash_amount": "1"})

    def test_unknown_sale_is_not_found(self):
        with self.assertRaises(LedgerNotFoundError):
            sale_service.edit_sale(sale_id=9999, data={})


class DeleteAndLockTests(TestCase):
    def setUp(self):
        self.bank = Bank.objects.create(name="Bank A")
        self.sale = sale_service.record_sale(
            data={"credit_amount": "200", "bank_amount": "50", "bank_id": self.bank.id}
        )
        self.receivable = Receivable.objects.get(sale=self.sale)

    def test_delete_cascades_receivables_and_recoveries(self):
        receivables_ledger.recover(receivable_id=self.receivable.id, amount="80")

        sale_service.delete_sale(sale_id=self.sale.id)

        self.assertFalse(Sale.objects.filter(id=self.sale.id).exists())
        self.assertFalse(Receivable.objects.exists())
        self.assertFalse(ReceivableRecovery.objects.exists())
        # bank deposits are left in place
        self.assertEqual(_deposits(self.sale).count(), 1)

    def test_locked_sale_rejects_delete(self):
        sale_service.lock_sale(sale_id=self.sale.id)
        with self.assertRaises(LockedResourceError):
            sale_service.delete_sale(sale_id=self.sale.id)
        self.assertTrue(Receivable.objects.filter(sale=self.sale).exists())

    def test_lock_is_one_way(self):
        sale = sale_service.lock_sale(sale_id=self.sale.id)
        self.assertTrue(sale.is_locked)

        # re-locking is harmless
        sale_service.lock_sale(sale_id=self.sale.id)

        with self.assertRaises(InvalidTransitionError):
            sale_service.lock_sale(sale_id=self.sale.id, lock=False)
        self.assertTrue(issubclass(InvalidTransitionError, LedgerConflictError))


class SaleReportTests(TestCase):
    def setUp(self):
        self.north = Branch.objects.create(name="North")
        self.south = Branch.objects.create(name="South")
        for branch, day, cash in (
            (self.north, date(2024, 3, 1), "100"),
            (self.south, date(2024, 3, 1), "40"),
            (self.north, date(2024, 3, 2), "60"),
        ):
            sale_service.record_sale(
                data={"branch_id": branch.id, "sale_date": day, "cash_amount": cash}
            )

    def test_daily(self):
        result = sale_reports.daily_summary(day=date(2024, 3, 1))
        self.assertEqual(len(result["rows"]), 2)
        self.assertEqual(result["total"], Decimal("140.00"))

    def test_range_by_branch(self):
        total = sale_reports.net_sales_total(
            date_from=date(2024, 3, 1), date_to=date(2024, 3, 31), branch_id=self.north.id
        )
        self.assertEqual(total, Decimal("160.00"))

    def test_range_rejects_inverted_window(self):
        with self.assertRaises(LedgerValidationError):
            sale_reports.range_summary(date_from=date(2024, 3, 2), date_to=date(2024, 3, 1))

    def test_monthly(self):
        result = sale_reports.monthly_summary(year=2024, month=3)
        self.assertEqual(result["to"], date(2024, 3, 31))
        self.assertEqual(len(result["rows"]), 3)
        self.assertEqual(result["total"], Decimal("200.00"))


class SaleApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.client.force_authenticate(self.user)
        self.bank = Bank.objects.create(name="Bank A")

    def test_create_returns_id_and_net(self):
        response = self.client.post(
            "/api/sales/",
            {"cash_amount": "120.00", "credit_amount": "30.00", "type": "mixed"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["net_sales"], "150.00")

        sale = Sale.objects.get(id=body["id"])
        self.assertEqual(sale.sale_type, Sale.TYPE_MIXED)
        self.assertEqual(sale.created_by, self.user)

    def test_bank_amount_without_bank_is_400(self):
        response = self.client.post(
            "/api/sales/", {"bank_amount": "10.00"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "validation")

    def test_detail_includes_bank_splits(self):
        sale = sale_service.record_sale(
            data={"bank_splits": [{"bank_id": self.bank.id, "amount": "75"}]}
        )
        response = self.client.get(f"/api/sales/{sale.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["bank_splits"][0]["amount"], "75.00")

    def test_locked_delete_is_400(self):
        sale = sale_service.record_sale(data={"cash_amount": "5"})
        self.client.post(f"/api/sales/{sale.id}/lock/", {"lock": True}, format="json")

        response = self.client.delete(f"/api/sales/{sale.id}/")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "locked")

    def test_list_is_paged_by_limit_and_offset(self):
        for cash in ("10", "20", "30"):
            sale_service.record_sale(data={"cash_amount": cash})

        response = self.client.get("/api/sales/?limit=2&offset=1")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["count"], 3)
        self.assertEqual(len(body["results"]), 2)
        self.assertIsNotNone(body["previous"])

    def test_daily_report_requires_date(self):
        response = self.client.get("/api/sales/reports/daily/")
        self.assertEqual(response.status_code, 400)


class SaleAttachmentTests(TestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.override = override_settings(MEDIA_ROOT=self.media_root)
        self.override.enable()
        self.sale = sale_service.record_sale(data={"cash_amount": "10"})

    def tearDown(self):
        self.override.disable()
        shutil.rmtree(self.media_root, ignore_errors=True)

    def _upload(self, name="slip.pdf"):
        return SimpleUploadedFile(name, b"%PDF-1.4 test", content_type="application/pdf")

    def test_add_and_remove(self):
        (attachment,) = sale_service.add_attachments(
            sale_id=self.sale.id, files=[self._upload("deposit slip.pdf")]
        )
        self.assertTrue(attachment.path.startswith("sales/"))
        self.assertTrue(default_storage.exists(attachment.path))

        with self.captureOnCommitCallbacks(execute=True):
            sale_service.remove_attachment(
                sale_id=self.sale.id, attachment_id=attachment.id
            )

        self.assertFalse(SaleAttachment.objects.exists())
        self.assertFalse(default_storage.exists(attachment.path))

    def test_empty_upload_rejected(self):
        with self.assertRaises(LedgerValidationError):
            sale_service.add_attachments(sale_id=self.sale.id, files=[])

    def test_delete_sale_removes_files(self):
        (attachment,) = sale_service.add_attachments(
            sale_id=self.sale.id, files=[self._upload()]
        )

        with self.captureOnCommitCallbacks(execute=True):
            sale_service.delete_sale(sale_id=self.sale.id)

        self.assertFalse(default_storage.exists(attachment.path))
