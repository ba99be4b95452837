"""
======================================================
PATH: payments/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Payment (audit), RentBill, StaffMember, SalaryRecord
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


def _money_field():
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)


STATUS_CHOICES = [
    ("pending", "Pending"),
    ("partial", "Partial"),
    ("paid", "Paid"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("banking", "0001_initial"),
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("supplier", "Supplier"),
                            ("rent_bill", "Rent / bill"),
                            ("salary", "Salary"),
                            ("receivable_recovery", "Receivable recovery"),
                        ],
                        max_length=30,
                    ),
                ),
                ("reference_type", models.CharField(max_length=30)),
                ("reference_id", models.PositiveBigIntegerField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "payment_date",
                    models.DateField(default=django.utils.timezone.localdate),
                ),
                (
                    "mode",
                    models.CharField(
                        choices=[("cash", "Cash"), ("bank", "Bank")],
                        default="cash",
                        max_length=10,
                    ),
                ),
                ("voucher_no", models.CharField(db_index=True, max_length=32)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "bank",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="banking.bank",
                    ),
                ),
            ],
            options={
                "ordering": ["-payment_date", "-id"],
                "indexes": [
                    models.Index(
                        fields=["reference_type", "reference_id"],
                        name="payment_reference_idx",
                    ),
                    models.Index(fields=["payment_date"], name="payment_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="payment_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("bank__isnull", True), ("mode", "cash")),
                            models.Q(("bank__isnull", False), ("mode", "bank")),
                            _connector="OR",
                        ),
                        name="payment_bank_matches_mode",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RentBill",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("title", models.CharField(max_length=200)),
                ("category", models.CharField(default="bill", max_length=50)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("paid_amount", _money_field()),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES, default="pending", max_length=20
                    ),
                ),
                ("due_date", models.DateField(blank=True, null=True)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["due_date", "-id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("paid_amount__lte", models.F("amount"))),
                        name="rent_bill_not_overpaid",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StaffMember",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=200)),
                ("fixed_salary", _money_field()),
                (
                    "commission_rate",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=5
                    ),
                ),
                (
                    "contact",
                    models.CharField(blank=True, default="", max_length=100),
                ),
                ("joined_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "branch",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="staff",
                        to="core.branch",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="SalaryRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("month_year", models.CharField(max_length=7)),
                ("base_salary", _money_field()),
                ("commission", _money_field()),
                ("advances", _money_field()),
                ("deductions", _money_field()),
                ("net_salary", _money_field()),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES, default="pending", max_length=20
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="salary_records",
                        to="payments.staffmember",
                    ),
                ),
            ],
            options={
                "ordering": ["-month_year", "staff_id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("staff", "month_year"),
                        name="uniq_salary_staff_month",
                    ),
                ],
            },
        ),
    ]
