# cashbook/models.py

from decimal import Decimal

from django.db import models

from core.models import Branch


class CashEntry(models.Model):
    """
    Daily cash-register reconciliation for one branch.

    expected_closing = opening + sales - expense - bank_deposit + bank_withdrawal
    difference       = closing_cash - expected_closing  (stored, derived)
    """

    branch = models.ForeignKey(
        Branch,
        on_delete=models.PROTECT,
        related_name="cash_entries",
    )
    entry_date = models.DateField()

    opening_cash = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    sales_cash = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    expense_cash = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    bank_deposit = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    bank_withdrawal = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    closing_cash = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    difference = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    remarks = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-entry_date", "branch_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["branch", "entry_date"],
                name="uniq_cash_entry_branch_date",
            ),
        ]
        indexes = [
            models.Index(fields=["entry_date"], name="cash_entry_date_idx"),
        ]

    @property
    def expected_closing(self) -> Decimal:
        return (
            self.opening_cash
            + self.sales_cash
            - self.expense_cash
            - self.bank_deposit
            + self.bank_withdrawal
        )

    def __str__(self):
        return f"{self.branch_id} @ {self.entry_date}"
