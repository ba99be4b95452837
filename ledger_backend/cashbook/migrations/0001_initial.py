"""
======================================================
PATH: cashbook/migrations/0001_initial.py
======================================================
MIGRATION: CREATE CashEntry (one per branch + date)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


def _money_field():
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CashEntry",
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
                ("entry_date", models.DateField()),
                ("opening_cash", _money_field()),
                ("sales_cash", _money_field()),
                ("expense_cash", _money_field()),
                ("bank_deposit", _money_field()),
                ("bank_withdrawal", _money_field()),
                ("closing_cash", _money_field()),
                ("difference", _money_field()),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "branch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cash_entries",
                        to="core.branch",
                    ),
                ),
            ],
            options={
                "ordering": ["-entry_date", "branch_id"],
                "indexes": [
                    models.Index(fields=["entry_date"], name="cash_entry_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("branch", "entry_date"),
                        name="uniq_cash_entry_branch_date",
                    ),
                ],
            },
        ),
    ]
