# core/apps.py

"""
CORE APP CONFIG

Shared ledger plumbing:
- Branches and customers (reference data)
- SystemSetting (numbering counters + prefixes)
- Voucher / invoice numbering
- Domain error taxonomy used by every ledger app
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Ledger Core"
