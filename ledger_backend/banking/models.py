# banking/models.py

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone


class Bank(models.Model):
    """
    A bank account. Its current balance is NEVER stored:
    opening_balance + credits - debits over its BankTransaction rows.
    """

    name = models.CharField(max_length=200)
    account_number = models.CharField(max_length=64, blank=True, default="")
    opening_balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class BankTransaction(models.Model):
    """
    Append-only movement on a bank account. Amount is always positive;
    the type decides the sign.
    """

    TYPE_DEPOSIT = "deposit"
    TYPE_WITHDRAWAL = "withdrawal"
    TYPE_PAYMENT = "payment"
    TYPE_TRANSFER_IN = "transfer_in"
    TYPE_TRANSFER_OUT = "transfer_out"

    TYPE_CHOICES = [
        (TYPE_DEPOSIT, "Deposit"),
        (TYPE_WITHDRAWAL, "Withdrawal"),
        (TYPE_PAYMENT, "Payment"),
        (TYPE_TRANSFER_IN, "Transfer in"),
        (TYPE_TRANSFER_OUT, "Transfer out"),
    ]

    CREDIT_TYPES = (TYPE_DEPOSIT, TYPE_TRANSFER_IN)
    DEBIT_TYPES = (TYPE_WITHDRAWAL, TYPE_PAYMENT, TYPE_TRANSFER_OUT)

    bank = models.ForeignKey(
        Bank,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    transaction_date = models.DateField(default=timezone.localdate)

    # "sale-<id>" for sale deposits, otherwise voucher-tagged text
    reference = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-transaction_date", "-id"]
        indexes = [
            models.Index(
                fields=["bank", "transaction_date"], name="bank_tx_bank_date_idx"
            ),
            models.Index(fields=["reference"], name="bank_tx_reference_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="bank_tx_amount_positive",
            ),
        ]

    @property
    def is_credit(self) -> bool:
        return self.type in self.CREDIT_TYPES

    def __str__(self):
        return f"{self.bank_id} {self.type} {self.amount}"
