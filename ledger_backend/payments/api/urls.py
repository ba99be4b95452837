# payments/api/urls.py

from django.urls import path

from payments.api.views import (
    PaymentListCreateView,
    PaymentOptionsView,
    RentBillLedgerView,
    RentBillListCreateView,
    SalaryRecordCreateView,
    StaffListCreateView,
)

urlpatterns = [
    path("", PaymentListCreateView.as_view(), name="payments"),
    path("options/", PaymentOptionsView.as_view(), name="payment-options"),
    path("rent-bills/", RentBillListCreateView.as_view(), name="rent-bills"),
    path(
        "rent-bills/ledger/", RentBillLedgerView.as_view(), name="rent-bill-ledger"
    ),
    path("staff/", StaffListCreateView.as_view(), name="staff"),
    path(
        "staff/<int:staff_id>/salary/",
        SalaryRecordCreateView.as_view(),
        name="staff-salary",
    ),
]
