# sales/views/reports.py

"""
SALES REPORTS

    GET /api/sales/reports/daily/?date=YYYY-MM-DD[&branch_id=]
    GET /api/sales/reports/monthly/?year=YYYY&month=M[&branch_id=]
    GET /api/sales/reports/date-range/?from=...&to=...[&branch_id=]

Totals are Σ net_sales; amounts are returned as 2dp strings.
"""

from __future__ import annotations

from decimal import Decimal

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.exceptions import ValidationError
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import ledger_error_response
from core.api.params import query_date, query_int
from core.services.exceptions import LedgerError
from sales.serializers import SaleSerializer
from sales.services import sale_reports


def _money(x) -> str:
    if x is None:
        return "0.00"
    return f"{Decimal(str(x)):.2f}"


class DailySalesReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["sales-reports"],
        parameters=[
            OpenApiParameter("date", str, required=True),
            OpenApiParameter("branch_id", int),
        ],
    )
    def get(self, request):
        day = query_date(request, "date", required=True)
        result = sale_reports.daily_summary(
            day=day, branch_id=query_int(request, "branch_id")
        )
        return Response(
            {
                "date": result["date"],
                "branch_id": result["branch_id"],
                "rows": SaleSerializer(result["rows"], many=True).data,
                "total": _money(result["total"]),
            }
        )


class MonthlySalesReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["sales-reports"],
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
            result = sale_reports.monthly_summary(
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
                        "sale_date": r["sale_date"],
                        "branch_id": r["branch_id"],
                        "branch_name": r["branch__name"],
                        "daily_total": _money(r["daily_total"]),
                    }
                    for r in result["rows"]
                ],
                "total": _money(result["total"]),
            }
        )


class DateRangeSalesReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["sales-reports"],
        parameters=[
            OpenApiParameter("from", str, required=True),
            OpenApiParameter("to", str, required=True),
            OpenApiParameter("branch_id", int),
        ],
    )
    def get(self, request):
        try:
            result = sale_reports.range_summary(
                date_from=query_date(request, "from", required=True),
                date_to=query_date(request, "to", required=True),
                branch_id=query_int(request, "branch_id"),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "from": result["from"],
                "to": result["to"],
                "branch_id": result["branch_id"],
                "rows": SaleSerializer(result["rows"], many=True).data,
                "total": _money(result["total"]),
            }
        )
