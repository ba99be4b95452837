# cashbook/api/urls.py

from django.urls import path

from cashbook.api.views import (
    CashBranchSummaryView,
    CashDifferenceAlertsView,
    CashEntryDetailView,
    CashEntryListCreateView,
)

urlpatterns = [
    path("entries/", CashEntryListCreateView.as_view(), name="cash-entries"),
    path(
        "entries/<int:branch_id>/<str:entry_date>/",
        CashEntryDetailView.as_view(),
        name="cash-entry-detail",
    ),
    path("branch-summary/", CashBranchSummaryView.as_view(), name="cash-branch-summary"),
    path(
        "difference-alerts/",
        CashDifferenceAlertsView.as_view(),
        name="cash-difference-alerts",
    ),
]
