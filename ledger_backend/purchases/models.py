# purchases/models.py

from decimal import ROUND_HALF_UP, Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import Branch

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class Supplier(models.Model):
    """
    Supplier master.
    """

    name = models.CharField(max_length=200)
    contact = models.CharField(max_length=100, blank=True, default="")
    address = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="supplier_name_idx"),
        ]

    def __str__(self):
        return self.name


class Purchase(models.Model):
    """
    Supplier invoice.

    `balance` is derived and stored: max(0, total_amount - paid_amount).
    It is recomputed on every save; services never assign it directly.
    """

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchases",
    )
    branch = models.ForeignKey(
        Branch,
        on_delete=models.PROTECT,
        related_name="purchases",
        null=True,
        blank=True,
    )

    invoice_no = models.CharField(max_length=64, unique=True)
    purchase_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField(null=True, blank=True)

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    remarks = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-purchase_date", "-id"]
        indexes = [
            models.Index(
                fields=["supplier", "purchase_date", "id"],
                name="purchase_supplier_fifo_idx",
            ),
            models.Index(fields=["due_date"], name="purchase_due_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_amount__gte=0),
                name="purchase_total_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(paid_amount__gte=0),
                name="purchase_paid_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(balance__gte=0),
                name="purchase_balance_non_negative",
            ),
        ]

    def recompute_balance(self) -> Decimal:
        self.balance = max(
            Decimal("0.00"), _money(self.total_amount) - _money(self.paid_amount)
        )
        return self.balance

    def save(self, *args, **kwargs):
        self.recompute_balance()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "balance" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["balance"]
        return super().save(*args, **kwargs)

    def __str__(self):
        return self.invoice_no
