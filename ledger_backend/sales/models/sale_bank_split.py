# sales/models/sale_bank_split.py

from django.db import models
from django.db.models import Q


class SaleBankSplit(models.Model):
    """
    Bank leg of a sale. Replaced wholesale whenever the sale is edited.
    """

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.CASCADE,
        related_name="bank_splits",
    )
    bank = models.ForeignKey(
        "banking.Bank",
        on_delete=models.PROTECT,
        related_name="sale_splits",
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="sale_split_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.sale_id} | {self.bank_id} | {self.amount}"
