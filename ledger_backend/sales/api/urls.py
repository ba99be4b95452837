# sales/api/urls.py

"""
SALES API URLS

Explicit non-PK routes (reports/) are listed BEFORE the <int:sale_id> routes.
"""

from django.urls import path

from sales.views.reports import (
    DailySalesReportView,
    DateRangeSalesReportView,
    MonthlySalesReportView,
)
from sales.views.sale import (
    SaleAttachmentDeleteView,
    SaleAttachmentListCreateView,
    SaleDetailView,
    SaleListCreateView,
    SaleLockView,
)

urlpatterns = [
    path("", SaleListCreateView.as_view(), name="sales"),
    path("reports/daily/", DailySalesReportView.as_view(), name="sales-reports-daily"),
    path(
        "reports/monthly/",
        MonthlySalesReportView.as_view(),
        name="sales-reports-monthly",
    ),
    path(
        "reports/date-range/",
        DateRangeSalesReportView.as_view(),
        name="sales-reports-date-range",
    ),
    path("<int:sale_id>/", SaleDetailView.as_view(), name="sale-detail"),
    path("<int:sale_id>/lock/", SaleLockView.as_view(), name="sale-lock"),
    path(
        "<int:sale_id>/attachments/",
        SaleAttachmentListCreateView.as_view(),
        name="sale-attachments",
    ),
    path(
        "<int:sale_id>/attachments/<int:attachment_id>/",
        SaleAttachmentDeleteView.as_view(),
        name="sale-attachment-delete",
    ),
]
