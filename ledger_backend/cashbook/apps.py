# cashbook/apps.py

from django.apps import AppConfig


class CashbookConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cashbook"
    verbose_name = "Cash Register"
