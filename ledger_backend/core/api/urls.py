# core/api/urls.py

from django.urls import path

from core.api.views import (
    ActivityLogListView,
    BranchListCreateView,
    CustomerDetailView,
    CustomerListCreateView,
)

urlpatterns = [
    path("branches/", BranchListCreateView.as_view(), name="core-branches"),
    path("customers/", CustomerListCreateView.as_view(), name="core-customers"),
    path(
        "customers/<int:customer_id>/",
        CustomerDetailView.as_view(),
        name="core-customer-detail",
    ),
    path("activity/", ActivityLogListView.as_view(), name="core-activity"),
]
