from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from banking.models import Bank, BankTransaction
from core.models import Customer, SystemSetting
from core.services.exceptions import (
    InvalidTransitionError,
    LedgerConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from payments.models import Payment, RentBill, SalaryRecord, StaffMember
from payments.services import bill_lifecycle, payables_service, payment_router
from purchases.models import Purchase, Supplier
from purchases.services import invoice_service
from receivables.models import Receivable
from receivables.services import receivables_ledger

User = get_user_model()


class BillLifecycleTests(TestCase):
    def test_paid_is_terminal(self):
        self.assertFalse(
            bill_lifecycle.can_transition(from_status="paid", to_status="partial")
        )

    def test_status_follows_paid_total(self):
        self.assertEqual(
            bill_lifecycle.status_for(paid=Decimal("0"), due=Decimal("10")), "pending"
        )
        self.assertEqual(
            bill_lifecycle.status_for(paid=Decimal("4"), due=Decimal("10")), "partial"
        )
        self.assertEqual(
            bill_lifecycle.status_for(paid=Decimal("10"), due=Decimal("10")), "paid"
        )

    def test_apply_on_paid_object_raises(self):
        bill = RentBill(amount=Decimal("10"), status=RentBill.STATUS_PAID)
        with self.assertRaises(InvalidTransitionError):
            bill_lifecycle.apply_payment_status(
                bill, paid=Decimal("12"), due=Decimal("10")
            )


class RentBillPaymentTests(TestCase):
    def setUp(self):
        self.bill = payables_service.create_rent_bill(
            title="Shop rent", amount="1000", category="rent"
        )
        self.bank = Bank.objects.create(name="Main", opening_balance="5000.00")

    def test_partial_then_full(self):
        payment_router.pay(
            category="rent_bill",
            reference_id=self.bill.id,
            amount="400",
            payment_method="cash",
        )
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, RentBill.STATUS_PARTIAL)

        payment_router.pay(
            category="rent_bill",
            reference_id=self.bill.id,
            amount="600",
            payment_method=self.bank.id,
        )
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, RentBill.STATUS_PAID)
        self.assertEqual(self.bill.paid_amount, Decimal("1000.00"))

        tx = BankTransaction.objects.get(bank=self.bank)
        self.assertEqual(tx.type, BankTransaction.TYPE_PAYMENT)
        self.assertEqual(Payment.objects.filter(reference_type="rent_bill").count(), 2)

    def test_amount_above_balance_is_conflict(self):
        with self.assertRaises(LedgerConflictError):
            payment_router.pay(
                category="rent_bill",
                reference_id=self.bill.id,
                amount="1000.01",
                payment_method="cash",
            )
        self.assertFalse(Payment.objects.exists())

    def test_unknown_bill_is_not_found(self):
        with self.assertRaises(LedgerNotFoundError):
            payment_router.pay(
                category="rent_bill",
                reference_id=9999,
                amount="10",
                payment_method="cash",
            )

    def test_bank_failure_rolls_back_everything(self):
        with mock.patch.object(
            payment_router,
            "record_transaction",
            side_effect=LedgerValidationError("bank down"),
        ):
            with self.assertRaises(LedgerValidationError):
                payment_router.pay(
                    category="rent_bill",
                    reference_id=self.bill.id,
                    amount="250",
                    payment_method=self.bank.id,
                )

        self.bill.refresh_from_db()
        self.assertEqual(self.bill.paid_amount, Decimal("0.00"))
        self.assertEqual(self.bill.status, RentBill.STATUS_PENDING)
        self.assertFalse(Payment.objects.exists())
        self.assertFalse(
            SystemSetting.objects.filter(key=SystemSetting.VOUCHER_COUNTER).exists()
        )


class SalaryPaymentTests(TestCase):
    def setUp(self):
        self.staff = StaffMember.objects.create(name="Ada", fixed_salary="800.00")

    def test_salary_record_defaults_and_net(self):
        record = payables_service.create_salary_record(
            staff_id=self.staff.id,
            month_year="2024-05",
            commission="50",
            advances="100",
            deductions="25",
        )
        self.assertEqual(record.base_salary, Decimal("800.00"))
        self.assertEqual(record.net_salary, Decimal("725.00"))
        self.assertEqual(record.status, SalaryRecord.STATUS_PENDING)

    def test_net_salary_floors_at_zero(self):
        record = payables_service.create_salary_record(
            staff_id=self.staff.id, month_year="2024-06", advances="2000"
        )
        self.assertEqual(record.net_salary, Decimal("0.00"))

    def test_duplicate_month_is_conflict(self):
        payables_service.create_salary_record(staff_id=self.staff.id, month_year="2024-05")
        with self.assertRaises(LedgerConflictError):
            payables_service.create_salary_record(
                staff_id=self.staff.id, month_year="2024-05"
            )

    def test_bad_month_format_rejected(self):
        with self.assertRaises(LedgerValidationError):
            payables_service.create_salary_record(
                staff_id=self.staff.id, month_year="May 2024"
            )

    def test_paid_salary_rejects_further_payment(self):
        record = payables_service.create_salary_record(
            staff_id=self.staff.id, month_year="2024-05"
        )
        payment_router.pay(
            category="salary", reference_id=record.id, amount="300", payment_method="cash"
        )
        record.refresh_from_db()
        self.assertEqual(record.status, SalaryRecord.STATUS_PARTIAL)

        payment_router.pay(
            category="salary", reference_id=record.id, amount="500", payment_method="cash"
        )
        record.refresh_from_db()
        self.assertEqual(record.status, SalaryRecord.STATUS_PAID)
        self.assertEqual(payables_service.salary_paid(record), Decimal("800.00"))

        with self.assertRaises(LedgerConflictError):
            payment_router.pay(
                category="salary",
                reference_id=record.id,
                amount="1",
                payment_method="cash",
            )


class SupplierAndRecoveryRoutingTests(TestCase):
    def setUp(self):
        self.bank = Bank.objects.create(name="Main", opening_balance="0.00")

    def test_supplier_payment_allocates_fifo(self):
        supplier = Supplier.objects.create(name="Grain Co")
        for day, total in ((1, "100"), (2, "50"), (3, "30")):
            invoice_service.create_invoice(
                supplier_id=supplier.id,
                total_amount=total,
                purchase_date=date(2024, 1, day),
                invoice_no=f"G-{day}",
            )

        payment = payment_router.pay(
            category="supplier",
            reference_id=supplier.id,
            amount="120",
            payment_method=str(self.bank.id),
        )

        balances = list(
            Purchase.objects.filter(supplier=supplier)
            .order_by("purchase_date")
            .values_list("balance", flat=True)
        )
        self.assertEqual(balances, [Decimal("0.00"), Decimal("30.00"), Decimal("30.00")])
        self.assertEqual(payment.reference_type, Payment.REF_SUPPLIER)
        tx = BankTransaction.objects.get(bank=self.bank)
        self.assertEqual(tx.type, BankTransaction.TYPE_PAYMENT)
        self.assertEqual(tx.reference, payment.voucher_no)

    def test_unknown_supplier_is_not_found(self):
        with self.assertRaises(LedgerNotFoundError):
            payment_router.pay(
                category="supplier", reference_id=777, amount="5", payment_method="cash"
            )

    def test_receivable_recovery_deposits_to_bank(self):
        customer = Customer.objects.create(name="Zed")
        receivable = receivables_ledger.create_standalone(
            customer_id=customer.id, amount="200"
        )

        payment = payment_router.pay(
            category="receivable_recovery",
            reference_id=receivable.id,
            amount="200",
            payment_method=self.bank.id,
            remarks="settled",
        )

        receivable.refresh_from_db()
        self.assertEqual(receivable.status, Receivable.STATUS_RECOVERED)
        self.assertEqual(payment.reference_type, Payment.REF_RECEIVABLE)
        tx = BankTransaction.objects.get(bank=self.bank)
        self.assertEqual(tx.type, BankTransaction.TYPE_DEPOSIT)
        recovery = receivable.recoveries.get()
        self.assertIn(payment.voucher_no, recovery.remarks)

    def test_recovery_above_due_is_conflict(self):
        receivable = receivables_ledger.create_standalone(customer_id=None, amount="50")
        with self.assertRaises(LedgerConflictError):
            payment_router.pay(
                category="receivable_recovery",
                reference_id=receivable.id,
                amount="60",
                payment_method="cash",
            )

    def test_validation(self):
        with self.assertRaises(LedgerValidationError):
            payment_router.pay(
                category="gift", reference_id=1, amount="5", payment_method="cash"
            )
        with self.assertRaises(LedgerValidationError):
            payment_router.pay(
                category="supplier", reference_id=None, amount="5", payment_method="cash"
            )
        with self.assertRaises(LedgerValidationError):
            payment_router.pay(
                category="supplier", reference_id=1, amount="0", payment_method="cash"
            )


class PaymentImmutabilityTests(TestCase):
    def test_payment_rows_cannot_change(self):
        bill = payables_service.create_rent_bill(title="Power", amount="90")
        payment = payment_router.pay(
            category="rent_bill", reference_id=bill.id, amount="90", payment_method="cash"
        )

        payment.remarks = "edited"
        with self.assertRaises(ValueError):
            payment.save()
        with self.assertRaises(ValueError):
            payment.delete()


class PaymentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="cashier", password="pass")
        self.client.force_authenticate(self.user)

    def test_pay_and_list_with_label(self):
        bill = payables_service.create_rent_bill(title="Water", amount="40")

        response = self.client.post(
            "/api/payments/",
            {
                "category": "rent_bill",
                "reference_id": bill.id,
                "amount": "40.00",
                "payment_method": "cash",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["ok"])
        self.assertEqual(body["amount"], "40.00")
        self.assertEqual(body["category"], "rent_bill")

        response = self.client.get("/api/payments/?type=rent_bill")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["results"][0]["reference_label"], "Water")

    def test_pay_missing_reference_is_404(self):
        response = self.client.post(
            "/api/payments/",
            {"category": "salary", "reference_id": 999, "amount": "10.00"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)

    def test_options_lists_open_items(self):
        payables_service.create_rent_bill(title="Rent", amount="100")
        Bank.objects.create(name="Main", opening_balance="10.00")

        response = self.client.get("/api/payments/options/")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body["rent_bills"]), 1)
        self.assertEqual(body["banks"][0]["current_balance"], "10.00")

    def test_staff_salary_endpoint(self):
        staff = StaffMember.objects.create(name="Bo", fixed_salary="500.00")
        response = self.client.post(
            f"/api/payments/staff/{staff.id}/salary/",
            {"month_year": "2024-07"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["net_salary"], "500.00")
