# payments/api/views.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import ledger_error_response
from core.api.params import query_date
from core.services.exceptions import LedgerError, LedgerNotFoundError
from payments.api.serializers import (
    PaymentOptionsSerializer,
    PaymentSerializer,
    PaySerializer,
    RentBillCreateSerializer,
    RentBillSerializer,
    SalaryRecordCreateSerializer,
    SalaryRecordSerializer,
    StaffMemberSerializer,
)
from payments.models import Payment, RentBill, StaffMember
from payments.services import payables_service, payment_router


class PaymentListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["payments"],
        parameters=[
            OpenApiParameter("type", str, description="Payment category"),
            OpenApiParameter("from", str),
            OpenApiParameter("to", str),
        ],
        responses=PaymentSerializer(many=True),
    )
    def get(self, request):
        qs = Payment.objects.select_related("bank")

        category = (request.query_params.get("type") or "").strip()
        if category:
            qs = qs.filter(category=category)
        date_from = query_date(request, "from")
        if date_from:
            qs = qs.filter(payment_date__gte=date_from)
        date_to = query_date(request, "to")
        if date_to:
            qs = qs.filter(payment_date__lte=date_to)

        page = self.paginate_queryset(qs.order_by("-payment_date", "-id"))
        labels = payables_service.reference_labels(page)
        return self.get_paginated_response(
            PaymentSerializer(page, many=True, context={"reference_labels": labels}).data
        )

    @extend_schema(tags=["payments"], request=PaySerializer)
    def post(self, request):
        s = PaySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            payment = payment_router.pay(
                category=data["category"],
                reference_id=data["reference_id"],
                amount=data["amount"],
                payment_date=data.get("payment_date"),
                payment_method=data.get("payment_method"),
                remarks=data.get("remarks", ""),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "ok": True,
                "id": payment.id,
                "amount": str(payment.amount),
                "category": payment.category,
                "voucher_no": payment.voucher_no,
            },
            status=status.HTTP_201_CREATED,
        )


class PaymentOptionsView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["payments"], responses=PaymentOptionsSerializer)
    def get(self, request):
        return Response(
            PaymentOptionsSerializer(payment_router.payment_options()).data
        )


class RentBillListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["payments"],
        parameters=[OpenApiParameter("status", str)],
        responses=RentBillSerializer(many=True),
    )
    def get(self, request):
        qs = RentBill.objects.all()
        status_filter = (request.query_params.get("status") or "").strip()
        if status_filter:
            qs = qs.filter(status=status_filter)
        return Response(
            RentBillSerializer(qs.order_by("due_date", "-id"), many=True).data
        )

    @extend_schema(
        tags=["payments"],
        request=RentBillCreateSerializer,
        responses={201: RentBillSerializer},
    )
    def post(self, request):
        s = RentBillCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            bill = payables_service.create_rent_bill(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(RentBillSerializer(bill).data, status=status.HTTP_201_CREATED)


class RentBillLedgerView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["payments"])
    def get(self, request):
        result = payables_service.rent_bill_ledger()
        return Response(
            {
                "bills": [
                    {
                        **RentBillSerializer(row["bill"]).data,
                        "payments": PaymentSerializer(row["payments"], many=True).data,
                    }
                    for row in result["bills"]
                ],
                "totalAmount": str(result["totalAmount"]),
                "totalPaid": str(result["totalPaid"]),
                "totalBalance": str(result["totalBalance"]),
            }
        )


class StaffListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["payments"], responses=StaffMemberSerializer(many=True))
    def get(self, request):
        qs = StaffMember.objects.select_related("branch").order_by("name")
        return Response(StaffMemberSerializer(qs, many=True).data)

    @extend_schema(
        tags=["payments"],
        request=StaffMemberSerializer,
        responses={201: StaffMemberSerializer},
    )
    def post(self, request):
        s = StaffMemberSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        staff = s.save()
        return Response(
            StaffMemberSerializer(staff).data, status=status.HTTP_201_CREATED
        )


class SalaryRecordCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["payments"], responses=SalaryRecordSerializer(many=True))
    def get(self, request, staff_id):
        staff = StaffMember.objects.filter(id=staff_id).first()
        if staff is None:
            return ledger_error_response(LedgerNotFoundError("Staff member not found."))

        records = staff.salary_records.select_related("staff").order_by("-month_year")
        return Response(SalaryRecordSerializer(records, many=True).data)

    @extend_schema(
        tags=["payments"],
        request=SalaryRecordCreateSerializer,
        responses={201: SalaryRecordSerializer},
    )
    def post(self, request, staff_id):
        s = SalaryRecordCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            record = payables_service.create_salary_record(
                staff_id=staff_id, **s.validated_data
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            SalaryRecordSerializer(record).data, status=status.HTTP_201_CREATED
        )
