# core/models.py

from django.conf import settings
from django.db import models
from django.utils import timezone


class Branch(models.Model):
    """
    A physical outlet. Sales, cash entries, receivables and purchases
    are attributed to a branch.
    """

    code = models.CharField(max_length=20, null=True, blank=True, unique=True)
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="core_branch_active_idx"),
        ]

    def __str__(self):
        return self.name


class Customer(models.Model):
    name = models.CharField(max_length=200)
    contact = models.CharField(max_length=100, blank=True, default="")
    address = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="core_customer_name_idx"),
        ]

    def __str__(self):
        return self.name


class SystemSetting(models.Model):
    """
    Key/value store for numbering state.

    Keys read/written by the ledger:
    - voucher_counter / invoice_counter: next number to hand out (integer text)
    - voucher_prefix / invoice_prefix: optional runtime prefix overrides
    """

    VOUCHER_COUNTER = "voucher_counter"
    VOUCHER_PREFIX = "voucher_prefix"
    INVOICE_COUNTER = "invoice_counter"
    INVOICE_PREFIX = "invoice_prefix"

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default="")

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}={self.value}"


class ActivityLog(models.Model):
    """
    Append-only trail of successful write requests.
    Created once. Never updated. Never deleted.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activity_logs",
    )
    action = models.CharField(max_length=50)
    module = models.CharField(max_length=50)
    entity_ref = models.CharField(max_length=100, blank=True, default="")
    details = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["module", "created_at"], name="core_activity_module_idx"
            ),
            models.Index(fields=["created_at"], name="core_activity_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("ActivityLog records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("ActivityLog records cannot be deleted")

    def __str__(self):
        return f"{self.module}:{self.action} {self.entity_ref}".strip()
