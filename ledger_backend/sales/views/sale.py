# sales/views/sale.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import ledger_error_response
from core.api.params import query_date, query_int
from core.services.exceptions import LedgerError
from sales.models import Sale
from sales.serializers import (
    SaleAttachmentSerializer,
    SaleCreateSerializer,
    SaleDetailSerializer,
    SaleLockSerializer,
    SaleSerializer,
    SaleUpdateSerializer,
)
from sales.services import sale_service


class SaleListCreateView(GenericAPIView):
    """
    GET  /api/sales/   filters: branch_id, from, to, type; paged by limit/offset
    POST /api/sales/   -> {id, net_sales}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["sales"],
        parameters=[
            OpenApiParameter("branch_id", int),
            OpenApiParameter("from", str),
            OpenApiParameter("to", str),
            OpenApiParameter("type", str),
        ],
        responses=SaleSerializer(many=True),
    )
    def get(self, request):
        qs = Sale.objects.select_related("branch", "customer").prefetch_related(
            "bank_splits__bank"
        )

        branch_id = query_int(request, "branch_id")
        if branch_id:
            qs = qs.filter(branch_id=branch_id)
        date_from = query_date(request, "from")
        if date_from:
            qs = qs.filter(sale_date__gte=date_from)
        date_to = query_date(request, "to")
        if date_to:
            qs = qs.filter(sale_date__lte=date_to)
        sale_type = (request.query_params.get("type") or "").strip()
        if sale_type:
            qs = qs.filter(sale_type=sale_type)

        page = self.paginate_queryset(qs.order_by("-sale_date", "-id"))
        return self.get_paginated_response(SaleSerializer(page, many=True).data)

    @extend_schema(tags=["sales"], request=SaleCreateSerializer)
    def post(self, request):
        s = SaleCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            sale = sale_service.record_sale(data=s.validated_data, user=request.user)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {"id": sale.id, "net_sales": str(sale.net_sales)},
            status=status.HTTP_201_CREATED,
        )


class SaleDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["sales"], responses=SaleDetailSerializer)
    def get(self, request, sale_id):
        try:
            sale = sale_service.get_sale(sale_id)
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(SaleDetailSerializer(sale).data)

    @extend_schema(tags=["sales"], request=SaleUpdateSerializer)
    def patch(self, request, sale_id):
        s = SaleUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            sale = sale_service.edit_sale(sale_id=sale_id, data=s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response({"ok": True, "net_sales": str(sale.net_sales)})

    @extend_schema(tags=["sales"])
    def delete(self, request, sale_id):
        try:
            sale_service.delete_sale(sale_id=sale_id)
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response({"ok": True})


class SaleLockView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SaleLockSerializer

    @extend_schema(tags=["sales"], request=SaleLockSerializer)
    def post(self, request, sale_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            sale = sale_service.lock_sale(
                sale_id=sale_id, lock=s.validated_data["lock"]
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response({"ok": True, "is_locked": sale.is_locked})


class SaleAttachmentListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(tags=["sales"], responses=SaleAttachmentSerializer(many=True))
    def get(self, request, sale_id):
        try:
            sale = sale_service.get_sale(sale_id)
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(
            SaleAttachmentSerializer(sale.attachments.all(), many=True).data
        )

    @extend_schema(tags=["sales"], responses={201: SaleAttachmentSerializer(many=True)})
    def post(self, request, sale_id):
        try:
            saved = sale_service.add_attachments(
                sale_id=sale_id, files=request.FILES.getlist("files")
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {"ok": True, "attachments": SaleAttachmentSerializer(saved, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class SaleAttachmentDeleteView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["sales"])
    def delete(self, request, sale_id, attachment_id):
        try:
            sale_service.remove_attachment(sale_id=sale_id, attachment_id=attachment_id)
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response({"ok": True})
