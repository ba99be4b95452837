# cashbook/api/views.py

from django.utils import timezone
from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from cashbook.api.serializers import (
    CashEntryCreateSerializer,
    CashEntrySerializer,
    CashEntryUpdateSerializer,
)
from cashbook.services import cash_register
from core.api.errors import ledger_error_response
from core.api.params import query_date, query_int
from core.services.exceptions import LedgerError, LedgerValidationError


def _path_date(raw):
    parsed = parse_date(raw or "")
    if parsed is None:
        raise LedgerValidationError("Invalid date. Use YYYY-MM-DD.")
    return parsed


class CashEntryListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["cash"],
        parameters=[
            OpenApiParameter("branch_id", int),
            OpenApiParameter("from", str),
            OpenApiParameter("to", str),
        ],
        responses=CashEntrySerializer(many=True),
    )
    def get(self, request):
        qs = cash_register.list_entries(
            branch_id=query_int(request, "branch_id"),
            date_from=query_date(request, "from"),
            date_to=query_date(request, "to"),
        )
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(CashEntrySerializer(page, many=True).data)

    @extend_schema(tags=["cash"], request=CashEntryCreateSerializer)
    def post(self, request):
        s = CashEntryCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            entry = cash_register.create_entry(**data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "id": entry.id,
                "expectedClosing": str(entry.expected_closing),
                "difference": str(entry.difference),
            },
            status=status.HTTP_201_CREATED,
        )


class CashEntryDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["cash"], responses=CashEntrySerializer)
    def get(self, request, branch_id, entry_date):
        try:
            entry = cash_register.get_entry(
                branch_id=branch_id, entry_date=_path_date(entry_date)
            )
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(CashEntrySerializer(entry).data)

    @extend_schema(tags=["cash"], request=CashEntryUpdateSerializer)
    def patch(self, request, branch_id, entry_date):
        s = CashEntryUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            entry = cash_register.update_entry(
                branch_id=branch_id,
                entry_date=_path_date(entry_date),
                data=s.validated_data,
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "ok": True,
                "expectedClosing": str(entry.expected_closing),
                "difference": str(entry.difference),
            }
        )


class CashBranchSummaryView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["cash"], parameters=[OpenApiParameter("date", str)])
    def get(self, request):
        day = query_date(request, "date") or timezone.localdate()
        result = cash_register.branch_summary(day=day)
        return Response(
            {
                "date": result["date"],
                "rows": CashEntrySerializer(result["rows"], many=True).data,
                "totalOpening": str(result["totalOpening"]),
                "totalClosing": str(result["totalClosing"]),
            }
        )


class CashDifferenceAlertsView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["cash"], parameters=[OpenApiParameter("date", str)])
    def get(self, request):
        day = query_date(request, "date") or timezone.localdate()
        result = cash_register.difference_alerts(day=day)
        return Response(
            {
                "date": result["date"],
                "rows": CashEntrySerializer(result["rows"], many=True).data,
            }
        )
