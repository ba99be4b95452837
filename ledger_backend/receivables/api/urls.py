# receivables/api/urls.py

from django.urls import path

from receivables.api.views import (
    BranchLedgerView,
    CustomerLedgerView,
    CustomersWithBalanceView,
    OverdueReceivablesView,
    ReceivableDetailView,
    ReceivableListCreateView,
    ReceivableRecoverView,
)

urlpatterns = [
    path("", ReceivableListCreateView.as_view(), name="receivables"),
    path("overdue/", OverdueReceivablesView.as_view(), name="receivables-overdue"),
    path(
        "customers/with-balance/",
        CustomersWithBalanceView.as_view(),
        name="receivables-customers-with-balance",
    ),
    path(
        "ledger/<int:customer_id>/",
        CustomerLedgerView.as_view(),
        name="receivables-customer-ledger",
    ),
    path(
        "branch-ledger/<int:branch_id>/",
        BranchLedgerView.as_view(),
        name="receivables-branch-ledger",
    ),
    path(
        "<int:receivable_id>/", ReceivableDetailView.as_view(), name="receivable-detail"
    ),
    path(
        "<int:receivable_id>/recover/",
        ReceivableRecoverView.as_view(),
        name="receivable-recover",
    ),
]
