# purchases/api/views.py

from decimal import Decimal

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import ledger_error_response
from core.api.params import query_date, query_int
from core.services.exceptions import LedgerError
from purchases.api.serializers import (
    DueReminderSerializer,
    PurchaseCreateSerializer,
    PurchasePaySerializer,
    PurchaseSerializer,
    PurchaseUpdateSerializer,
    SupplierPaymentSerializer,
    SupplierSerializer,
    SupplierSummarySerializer,
)
from purchases.models import Purchase, Supplier
from purchases.services import invoice_service, purchase_reports, supplier_ledger


def _money(x) -> str:
    if x is None:
        return "0.00"
    return f"{Decimal(str(x)):.2f}"


class SupplierListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["purchases"], responses=SupplierSerializer(many=True))
    def get(self, request):
        qs = Supplier.objects.order_by("name")
        return Response(SupplierSerializer(qs, many=True).data)

    @extend_schema(
        tags=["purchases"],
        request=SupplierSerializer,
        responses={201: SupplierSerializer},
    )
    def post(self, request):
        s = SupplierSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        supplier = s.save()
        return Response(
            SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED
        )


class SupplierDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["purchases"], responses=SupplierSerializer)
    def get(self, request, supplier_id):
        supplier = get_object_or_404(Supplier, id=supplier_id)
        return Response(SupplierSerializer(supplier).data)

    @extend_schema(
        tags=["purchases"], request=SupplierSerializer, responses=SupplierSerializer
    )
    def patch(self, request, supplier_id):
        supplier = get_object_or_404(Supplier, id=supplier_id)
        if not any(f in request.data for f in ("name", "contact", "address")):
            raise ValidationError({"detail": "No updates."})

        s = SupplierSerializer(supplier, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        supplier = s.save()
        return Response(SupplierSerializer(supplier).data)


class SupplierLedgerView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["purchases"])
    def get(self, request, supplier_id):
        try:
            result = supplier_ledger.supplier_ledger(supplier_id=supplier_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "supplier": SupplierSerializer(result["supplier"]).data,
                "purchases": PurchaseSerializer(result["purchases"], many=True).data,
                "payments": SupplierPaymentSerializer(
                    result["payments"], many=True
                ).data,
                "totalPurchases": str(result["totalPurchases"]),
                "totalPaid": str(result["totalPaid"]),
                "balance": str(result["balance"]),
            }
        )


class PurchaseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["purchases"],
        parameters=[
            OpenApiParameter("supplier_id", int),
            OpenApiParameter("branch_id", int),
            OpenApiParameter("from", str),
            OpenApiParameter("to", str),
            OpenApiParameter("open", bool),
        ],
        responses=PurchaseSerializer(many=True),
    )
    def get(self, request):
        qs = Purchase.objects.select_related("supplier", "branch")

        supplier_id = query_int(request, "supplier_id")
        if supplier_id:
            qs = qs.filter(supplier_id=supplier_id)
        branch_id = query_int(request, "branch_id")
        if branch_id:
            qs = qs.filter(branch_id=branch_id)
        date_from = query_date(request, "from")
        if date_from:
            qs = qs.filter(purchase_date__gte=date_from)
        date_to = query_date(request, "to")
        if date_to:
            qs = qs.filter(purchase_date__lte=date_to)
        if (request.query_params.get("open") or "").lower() in ("1", "true"):
            qs = qs.filter(balance__gt=0)

        page = self.paginate_queryset(qs.order_by("-purchase_date", "-id"))
        return self.get_paginated_response(PurchaseSerializer(page, many=True).data)

    @extend_schema(
        tags=["purchases"],
        request=PurchaseCreateSerializer,
        responses={201: PurchaseSerializer},
    )
    def post(self, request):
        s = PurchaseCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            purchase = invoice_service.create_invoice(
                supplier_id=data["supplier_id"],
                branch_id=data.get("branch_id"),
                invoice_no=data.get("invoice_no"),
                purchase_date=data.get("purchase_date"),
                due_date=data.get("due_date"),
                total_amount=data["total_amount"],
                paid_amount=data.get("paid_amount"),
                remarks=data.get("remarks", ""),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED
        )


class PurchaseDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["purchases"], responses=PurchaseSerializer)
    def get(self, request, purchase_id):
        try:
            purchase = invoice_service.get_purchase(purchase_id)
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(PurchaseSerializer(purchase).data)

    @extend_schema(
        tags=["purchases"],
        request=PurchaseUpdateSerializer,
        responses=PurchaseSerializer,
    )
    def patch(self, request, purchase_id):
        s = PurchaseUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            purchase = invoice_service.edit_invoice(
                purchase_id=purchase_id, data=dict(s.validated_data)
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(PurchaseSerializer(purchase).data)


class PurchasePayView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchasePaySerializer

    @extend_schema(tags=["purchases"], request=PurchasePaySerializer)
    def post(self, request, purchase_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            purchase, payment = invoice_service.pay_invoice(
                purchase_id=purchase_id,
                amount=data["amount"],
                payment_method=data.get("payment_method"),
                payment_date=data.get("payment_date"),
                remarks=data.get("remarks", ""),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "ok": True,
                "balance": str(purchase.balance),
                "voucher_no": payment.voucher_no,
            }
        )


class DueRemindersView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["purchases"],
        parameters=[OpenApiParameter("days", int)],
        responses=DueReminderSerializer(many=True),
    )
    def get(self, request):
        rows = supplier_ledger.due_reminders(days=query_int(request, "days"))
        return Response(DueReminderSerializer(rows, many=True).data)


class SupplierWiseReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["purchases"],
        parameters=[OpenApiParameter("from", str), OpenApiParameter("to", str)],
        responses=SupplierSummarySerializer(many=True),
    )
    def get(self, request):
        qs = supplier_ledger.supplier_summary(
            date_from=query_date(request, "from"),
            date_to=query_date(request, "to"),
        )
        return Response(SupplierSummarySerializer(qs, many=True).data)


class DailyPurchaseReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["purchases"],
        parameters=[
            OpenApiParameter("date", str, required=True),
            OpenApiParameter("branch_id", int),
        ],
    )
    def get(self, request):
        day = query_date(request, "date", required=True)
        result = purchase_reports.daily_summary(
            day=day, branch_id=query_int(request, "branch_id")
        )
        return Response(
            {
                "date": result["date"],
                "branch_id": result["branch_id"],
                "rows": PurchaseSerializer(result["rows"], many=True).data,
                "total": _money(result["total"]),
            }
        )


class MonthlyPurchaseReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["purchases"],
        parameters=[
            OpenApiParameter("year", int, required=True),
            OpenApiParameter("month", int, required=True),
            OpenApiParameter("branch_id", int),
        ],
    )
    def get(self, request):
        year = query_int(request, "year")
        month = query_int(request, "month")
        if not year or not month:
            raise ValidationError({"detail": "month and year required"})

        try:
            result = purchase_reports.monthly_summary(
                year=year, month=month, branch_id=query_int(request, "branch_id")
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "year": result["year"],
                "month": result["month"],
                "from": result["from"],
                "to": result["to"],
                "rows": [
                    {
                        "purchase_date": r["purchase_date"],
                        "branch_id": r["branch_id"],
                        "branch_name": r["branch__name"],
                        "daily_total": _money(r["daily_total"]),
                    }
                    for r in result["rows"]
                ],
                "total": _money(result["total"]),
            }
        )
