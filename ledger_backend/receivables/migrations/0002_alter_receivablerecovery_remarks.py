"""
======================================================
PATH: receivables/migrations/0002_alter_receivablerecovery_remarks.py
======================================================
MIGRATION: ReceivableRecovery.remarks -> TEXT
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("receivables", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="receivablerecovery",
            name="remarks",
            field=models.TextField(blank=True, default=""),
        ),
    ]
