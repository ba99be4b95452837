# banking/api/urls.py

from django.urls import path

from banking.api.views import (
    BankDetailView,
    BankListCreateView,
    BankReconciliationView,
    BankStatementView,
    BankTransactionCreateView,
    BankTransferView,
)

urlpatterns = [
    path("banks/", BankListCreateView.as_view(), name="banking-banks"),
    path("banks/<int:bank_id>/", BankDetailView.as_view(), name="banking-bank-detail"),
    path(
        "banks/<int:bank_id>/ledger/",
        BankStatementView.as_view(),
        name="banking-bank-ledger",
    ),
    path(
        "banks/<int:bank_id>/reconciliation/",
        BankReconciliationView.as_view(),
        name="banking-bank-reconciliation",
    ),
    path(
        "banks/<int:bank_id>/transactions/",
        BankTransactionCreateView.as_view(),
        name="banking-bank-transactions",
    ),
    path("transfer/", BankTransferView.as_view(), name="banking-transfer"),
]
