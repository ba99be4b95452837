# receivables/api/views.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import ledger_error_response
from core.api.serializers import BranchSerializer, CustomerSerializer
from core.api.params import query_int
from core.services.exceptions import LedgerError
from receivables.api.serializers import (
    CustomerBalanceSerializer,
    LedgerEntrySerializer,
    ReceivableCreateSerializer,
    ReceivableRecoverySerializer,
    ReceivableSerializer,
    ReceivableUpdateSerializer,
    RecoverySerializer,
)
from receivables.models import Receivable
from receivables.services import customer_ledger, receivables_ledger


def _ledger_payload(result: dict) -> dict:
    return {
        "receivables": ReceivableSerializer(result["receivables"], many=True).data,
        "recoveries": ReceivableRecoverySerializer(result["recoveries"], many=True).data,
        "entries": LedgerEntrySerializer(result["entries"], many=True).data,
        "totalDue": str(result["totalDue"]),
        "recoveredTotal": str(result["recoveredTotal"]),
    }


class ReceivableListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["receivables"],
        parameters=[
            OpenApiParameter("customer_id", int),
            OpenApiParameter("branch_id", int),
            OpenApiParameter("status", str),
        ],
        responses=ReceivableSerializer(many=True),
    )
    def get(self, request):
        qs = Receivable.objects.select_related("customer", "branch")

        customer_id = query_int(request, "customer_id")
        if customer_id:
            qs = qs.filter(customer_id=customer_id)
        branch_id = query_int(request, "branch_id")
        if branch_id:
            qs = qs.filter(branch_id=branch_id)
        status_filter = (request.query_params.get("status") or "").strip()
        if status_filter:
            qs = qs.filter(status=status_filter)

        page = self.paginate_queryset(qs.order_by("due_date", "-id"))
        return self.get_paginated_response(ReceivableSerializer(page, many=True).data)

    @extend_schema(
        tags=["receivables"],
        request=ReceivableCreateSerializer,
        responses={201: ReceivableSerializer},
    )
    def post(self, request):
        s = ReceivableCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            receivable = receivables_ledger.create_standalone(
                customer_id=data.get("customer_id"),
                branch_id=data.get("branch_id"),
                amount=data["amount"],
                due_date=data.get("due_date"),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            ReceivableSerializer(receivable).data, status=status.HTTP_201_CREATED
        )


class ReceivableDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["receivables"],
        request=ReceivableUpdateSerializer,
        responses=ReceivableSerializer,
    )
    def patch(self, request, receivable_id):
        s = ReceivableUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            receivable = receivables_ledger.update_due_date(
                receivable_id=receivable_id, due_date=s.validated_data["due_date"]
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(ReceivableSerializer(receivable).data)


class ReceivableRecoverView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RecoverySerializer

    @extend_schema(tags=["receivables"], request=RecoverySerializer)
    def post(self, request, receivable_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            recovery = receivables_ledger.recover(
                receivable_id=receivable_id,
                amount=data["amount"],
                remarks=data.get("remarks", ""),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        receivable = recovery.receivable
        return Response(
            {
                "ok": True,
                "remaining": str(receivable.amount),
                "status": receivable.status,
            }
        )


class OverdueReceivablesView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["receivables"], responses=ReceivableSerializer(many=True))
    def get(self, request):
        return Response(
            ReceivableSerializer(customer_ledger.overdue(), many=True).data
        )


class CustomersWithBalanceView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["receivables"], responses=CustomerBalanceSerializer(many=True))
    def get(self, request):
        return Response(
            CustomerBalanceSerializer(
                customer_ledger.customers_with_balance(), many=True
            ).data
        )


class CustomerLedgerView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["receivables"])
    def get(self, request, customer_id):
        try:
            result = customer_ledger.customer_ledger(customer_id=customer_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        payload = _ledger_payload(result)
        payload["customer"] = CustomerSerializer(result["customer"]).data
        return Response(payload)


class BranchLedgerView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["receivables"])
    def get(self, request, branch_id):
        try:
            result = customer_ledger.branch_ledger(branch_id=branch_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        payload = _ledger_payload(result)
        payload["branch"] = BranchSerializer(result["branch"]).data
        return Response(payload)
