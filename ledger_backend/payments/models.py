# payments/models.py

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone

from banking.models import Bank
from core.models import Branch


class Payment(models.Model):
    """
    Immutable audit record of a routed payment.

    Written once, in the same transaction as the ledger mutation it
    describes. Never updated, never deleted.
    """

    CATEGORY_SUPPLIER = "supplier"
    CATEGORY_RENT_BILL = "rent_bill"
    CATEGORY_SALARY = "salary"
    CATEGORY_RECEIVABLE_RECOVERY = "receivable_recovery"

    CATEGORY_CHOICES = [
        (CATEGORY_SUPPLIER, "Supplier"),
        (CATEGORY_RENT_BILL, "Rent / bill"),
        (CATEGORY_SALARY, "Salary"),
        (CATEGORY_RECEIVABLE_RECOVERY, "Receivable recovery"),
    ]

    # What reference_id points at
    REF_SUPPLIER = "supplier"
    REF_RENT_BILL = "rent_bill"
    REF_SALARY = "salary"
    REF_RECEIVABLE = "receivable"

    REFERENCE_TYPE_BY_CATEGORY = {
        CATEGORY_SUPPLIER: REF_SUPPLIER,
        CATEGORY_RENT_BILL: REF_RENT_BILL,
        CATEGORY_SALARY: REF_SALARY,
        CATEGORY_RECEIVABLE_RECOVERY: REF_RECEIVABLE,
    }

    MODE_CASH = "cash"
    MODE_BANK = "bank"

    MODE_CHOICES = [
        (MODE_CASH, "Cash"),
        (MODE_BANK, "Bank"),
    ]

    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    reference_type = models.CharField(max_length=30)
    reference_id = models.PositiveBigIntegerField()

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    payment_date = models.DateField(default=timezone.localdate)

    mode = models.CharField(max_length=10, choices=MODE_CHOICES, default=MODE_CASH)
    bank = models.ForeignKey(
        Bank,
        on_delete=models.PROTECT,
        related_name="payments",
        null=True,
        blank=True,
    )

    voucher_no = models.CharField(max_length=32, db_index=True)
    remarks = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-payment_date", "-id"]
        indexes = [
            models.Index(
                fields=["reference_type", "reference_id"], name="payment_reference_idx"
            ),
            models.Index(fields=["payment_date"], name="payment_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="payment_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(mode="cash", bank__isnull=True)
                | Q(mode="bank", bank__isnull=False),
                name="payment_bank_matches_mode",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Payments are immutable audit records.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Payments are immutable audit records.")

    def __str__(self):
        return f"{self.voucher_no} {self.category} {self.amount}"


class RentBill(models.Model):
    """
    Rent, utility or any other bill payable in instalments.

    pending -> partial -> paid (see services/bill_lifecycle.py)
    """

    STATUS_PENDING = "pending"
    STATUS_PARTIAL = "partial"
    STATUS_PAID = "paid"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PARTIAL, "Partial"),
        (STATUS_PAID, "Paid"),
    ]

    OPEN_STATUSES = (STATUS_PENDING, STATUS_PARTIAL)

    title = models.CharField(max_length=200)
    category = models.CharField(max_length=50, default="bill")
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING
    )
    due_date = models.DateField(null=True, blank=True)
    remarks = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["due_date", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(paid_amount__lte=models.F("amount")),
                name="rent_bill_not_overpaid",
            ),
        ]

    @property
    def balance(self) -> Decimal:
        return self.amount - self.paid_amount

    def __str__(self):
        return self.title


class StaffMember(models.Model):
    name = models.CharField(max_length=200)
    branch = models.ForeignKey(
        Branch,
        on_delete=models.PROTECT,
        related_name="staff",
        null=True,
        blank=True,
    )
    fixed_salary = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    commission_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    contact = models.CharField(max_length=100, blank=True, default="")
    joined_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class SalaryRecord(models.Model):
    """
    One month's salary for a staff member.

    net_salary = max(0, base + commission - advances - deductions)
    Paid so far = Σ Payment.amount where reference_type == "salary".
    """

    STATUS_PENDING = "pending"
    STATUS_PARTIAL = "partial"
    STATUS_PAID = "paid"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PARTIAL, "Partial"),
        (STATUS_PAID, "Paid"),
    ]

    staff = models.ForeignKey(
        StaffMember,
        on_delete=models.PROTECT,
        related_name="salary_records",
    )
    month_year = models.CharField(max_length=7)

    base_salary = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    commission = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    advances = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    deductions = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    net_salary = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-month_year", "staff_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["staff", "month_year"],
                name="uniq_salary_staff_month",
            ),
        ]

    def recompute_net(self) -> Decimal:
        self.net_salary = max(
            Decimal("0.00"),
            self.base_salary + self.commission - self.advances - self.deductions,
        )
        return self.net_salary

    def __str__(self):
        return f"{self.staff_id} {self.month_year}"
