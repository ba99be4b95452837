# payments/apps.py

"""
PAYMENTS APP CONFIG

- PaymentRouter: one entry point for supplier / rent-bill / salary /
  receivable-recovery payments
- Payment: immutable audit row for every routed payment
- Rent & bills, staff and salary records (the payables it settles)
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
