# sales/models/sale.py

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    One day's (or one ticket's) takings for a branch.

    GUARANTEES:
    - net_sales = max(0, cash + bank + credit - discount - returns),
      recomputed by the service on every write
    - bank_amount equals the sum of bank_splits when splits exist
    - a locked sale can be neither edited nor deleted

    SIDE EFFECTS (owned by sales.services.sale_service):
    - credit_amount > 0 -> one Receivable linked via receivables.sale
    - bank_amount > 0   -> BankTransaction(deposit) rows referenced "sale-<id>"
    """

    TYPE_CASH = "cash"
    TYPE_CREDIT = "credit"
    TYPE_MIXED = "mixed"

    TYPE_CHOICES = [
        (TYPE_CASH, "Cash"),
        (TYPE_CREDIT, "Credit"),
        (TYPE_MIXED, "Mixed"),
    ]

    branch = models.ForeignKey(
        "core.Branch",
        on_delete=models.PROTECT,
        related_name="sales",
        null=True,
        blank=True,
    )
    customer = models.ForeignKey(
        "core.Customer",
        on_delete=models.PROTECT,
        related_name="sales",
        null=True,
        blank=True,
    )
    # Primary bank: first split's bank, or the single bank_id
    bank = models.ForeignKey(
        "banking.Bank",
        on_delete=models.PROTECT,
        related_name="sales",
        null=True,
        blank=True,
    )

    sale_date = models.DateField(default=timezone.localdate)
    sale_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_CASH)

    cash_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    bank_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    credit_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    discount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    returns_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    net_sales = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    remarks = models.TextField(blank=True, default="")
    voucher_no = models.CharField(max_length=32, blank=True, default="", db_index=True)

    is_locked = models.BooleanField(default=False)

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_sales",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-sale_date", "-id"]
        indexes = [
            models.Index(fields=["sale_date", "branch"], name="sale_date_branch_idx"),
            models.Index(fields=["sale_type"], name="sale_type_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(net_sales__gte=0),
                name="sale_net_non_negative",
            ),
        ]

    def __str__(self):
        return f"Sale {self.id} | {self.sale_date} | {self.net_sales}"
