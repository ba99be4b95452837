# purchases/api/urls.py

"""
Explicit non-PK routes (suppliers/, reports/, due-reminders/) are listed
BEFORE the <int:purchase_id> routes.
"""

from django.urls import path

from purchases.api.views import (
    DailyPurchaseReportView,
    DueRemindersView,
    MonthlyPurchaseReportView,
    PurchaseDetailView,
    PurchaseListCreateView,
    PurchasePayView,
    SupplierDetailView,
    SupplierLedgerView,
    SupplierListCreateView,
    SupplierWiseReportView,
)

urlpatterns = [
    path("", PurchaseListCreateView.as_view(), name="purchases"),
    path("suppliers/", SupplierListCreateView.as_view(), name="purchase-suppliers"),
    path(
        "suppliers/<int:supplier_id>/",
        SupplierDetailView.as_view(),
        name="purchase-supplier-detail",
    ),
    path(
        "suppliers/<int:supplier_id>/ledger/",
        SupplierLedgerView.as_view(),
        name="purchase-supplier-ledger",
    ),
    path(
        "due-reminders/", DueRemindersView.as_view(), name="purchase-due-reminders"
    ),
    path(
        "reports/daily/",
        DailyPurchaseReportView.as_view(),
        name="purchase-reports-daily",
    ),
    path(
        "reports/monthly/",
        MonthlyPurchaseReportView.as_view(),
        name="purchase-reports-monthly",
    ),
    path(
        "reports/supplier-wise/",
        SupplierWiseReportView.as_view(),
        name="purchase-supplier-wise-report",
    ),
    path("<int:purchase_id>/", PurchaseDetailView.as_view(), name="purchase-detail"),
    path("<int:purchase_id>/pay/", PurchasePayView.as_view(), name="purchase-pay"),
]
