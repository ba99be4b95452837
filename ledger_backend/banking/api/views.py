# banking/api/views.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from banking.api.serializers import (
    BankSerializer,
    BankTransactionCreateSerializer,
    BankTransactionSerializer,
    BankTransferSerializer,
    ReconciliationRowSerializer,
)
from banking.models import Bank
from banking.services import bank_ledger
from core.api.errors import ledger_error_response
from core.api.params import query_date
from core.services.exceptions import LedgerError

DATE_RANGE_PARAMS = [
    OpenApiParameter("from", str, description="YYYY-MM-DD"),
    OpenApiParameter("to", str, description="YYYY-MM-DD"),
]


class BankListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["banking"], responses=BankSerializer(many=True))
    def get(self, request):
        qs = bank_ledger.with_balances().order_by("name")
        return Response(BankSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["banking"], request=BankSerializer, responses={201: BankSerializer}
    )
    def post(self, request):
        s = BankSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        bank = s.save()
        bank = bank_ledger.with_balances().get(id=bank.id)
        return Response(BankSerializer(bank).data, status=status.HTTP_201_CREATED)


class BankDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    def _load(self, bank_id):
        return bank_ledger.with_balances().filter(id=bank_id).first()

    @extend_schema(tags=["banking"], responses=BankSerializer)
    def get(self, request, bank_id):
        bank = self._load(bank_id)
        if bank is None:
            return Response(
                {"detail": "Bank account not found.", "code": "not_found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(BankSerializer(bank).data)

    @extend_schema(tags=["banking"], request=BankSerializer, responses=BankSerializer)
    def patch(self, request, bank_id):
        bank = Bank.objects.filter(id=bank_id).first()
        if bank is None:
            return Response(
                {"detail": "Bank account not found.", "code": "not_found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        s = BankSerializer(bank, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        return Response(BankSerializer(self._load(bank_id)).data)


class BankStatementView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["banking"], parameters=DATE_RANGE_PARAMS)
    def get(self, request, bank_id):
        try:
            bank, rows, balance = bank_ledger.statement(
                bank_id=bank_id,
                date_from=query_date(request, "from"),
                date_to=query_date(request, "to"),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "bank": {"id": bank.id, "name": bank.name, "current_balance": balance},
                "transactions": BankTransactionSerializer(rows, many=True).data,
            }
        )


class BankReconciliationView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["banking"], parameters=DATE_RANGE_PARAMS)
    def get(self, request, bank_id):
        try:
            result = bank_ledger.reconciliation(
                bank_id=bank_id,
                date_from=query_date(request, "from"),
                date_to=query_date(request, "to"),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        bank = result["bank"]
        return Response(
            {
                "bank": {
                    "id": bank.id,
                    "name": bank.name,
                    "opening_balance": result["opening_balance"],
                    "starting_balance": result["starting_balance"],
                    "calculated_balance": result["calculated_balance"],
                },
                "statement": ReconciliationRowSerializer(
                    result["statement"], many=True
                ).data,
            }
        )


class BankTransactionCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BankTransactionCreateSerializer

    @extend_schema(tags=["banking"], request=BankTransactionCreateSerializer)
    def post(self, request, bank_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            tx, balance = bank_ledger.post_manual_transaction(
                bank_id=bank_id,
                type=data["type"],
                amount=data["amount"],
                transaction_date=data.get("transaction_date"),
                reference=data.get("reference", ""),
                description=data.get("description", ""),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "id": tx.id,
                "type": tx.type,
                "amount": str(tx.amount),
                "reference": tx.reference,
                "balance": str(balance),
            },
            status=status.HTTP_201_CREATED,
        )


class BankTransferView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BankTransferSerializer

    @extend_schema(tags=["banking"], request=BankTransferSerializer)
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = bank_ledger.transfer(
                from_bank_id=data["from_bank_id"],
                to_bank_id=data["to_bank_id"],
                amount=data["amount"],
                transaction_date=data.get("transaction_date"),
                description=data.get("description", ""),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                "ok": True,
                "amount": str(result["amount"]),
                "voucher_no": result["voucher_no"],
            },
            status=status.HTTP_201_CREATED,
        )
