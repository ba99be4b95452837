"""
======================================================
PATH: banking/migrations/0002_alter_banktransaction_description.py
======================================================
MIGRATION: BankTransaction.description -> TEXT
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("banking", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="banktransaction",
            name="description",
            field=models.TextField(blank=True, default=""),
        ),
    ]
