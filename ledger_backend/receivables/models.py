# receivables/models.py

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import Branch, Customer


class Receivable(models.Model):
    """
    Amount owed by a customer.

    `amount` is the REMAINING due and only moves down (via recoveries).
    `original_amount` is frozen at creation.

    Status (see services/receivable_lifecycle.py):
    - pending:   no recovery yet
    - partial:   0 < amount < original_amount
    - recovered: amount == 0 (terminal)
    """

    STATUS_PENDING = "pending"
    STATUS_PARTIAL = "partial"
    STATUS_RECOVERED = "recovered"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PARTIAL, "Partial"),
        (STATUS_RECOVERED, "Recovered"),
    ]

    OPEN_STATUSES = (STATUS_PENDING, STATUS_PARTIAL)

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="receivables",
        null=True,
        blank=True,
    )
    # Set when auto-generated from a credit sale; deleted with that sale.
    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.PROTECT,
        related_name="receivables",
        null=True,
        blank=True,
    )
    branch = models.ForeignKey(
        Branch,
        on_delete=models.PROTECT,
        related_name="receivables",
        null=True,
        blank=True,
    )

    original_amount = models.DecimalField(max_digits=14, decimal_places=2)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    due_date = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING
    )

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["due_date", "-id"]
        indexes = [
            models.Index(fields=["customer", "status"], name="recv_customer_status_idx"),
            models.Index(fields=["branch", "status"], name="recv_branch_status_idx"),
            models.Index(fields=["due_date"], name="recv_due_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gte=0),
                name="recv_amount_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(amount__lte=models.F("original_amount")),
                name="recv_amount_lte_original",
            ),
        ]

    @property
    def recovered_amount(self) -> Decimal:
        return self.original_amount - self.amount

    def __str__(self):
        return f"Receivable #{self.pk} ({self.status})"


class ReceivableRecovery(models.Model):
    """
    Append-only history of recoveries against a receivable.
    """

    receivable = models.ForeignKey(
        Receivable,
        on_delete=models.CASCADE,
        related_name="recoveries",
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    remarks = models.TextField(blank=True, default="")
    recorded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["recorded_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="recv_recovery_amount_positive",
            ),
        ]

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            raise ValueError("Receivable recoveries are immutable.")
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"Recovery {self.amount} on #{self.receivable_id}"
