# receivables/api/serializers.py

from rest_framework import serializers

from receivables.models import Receivable, ReceivableRecovery


class ReceivableSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(
        source="customer.name", read_only=True, default=None
    )
    branch_name = serializers.CharField(source="branch.name", read_only=True, default=None)

    class Meta:
        model = Receivable
        fields = (
            "id",
            "customer",
            "customer_name",
            "sale",
            "branch",
            "branch_name",
            "original_amount",
            "amount",
            "due_date",
            "status",
            "created_at",
        )
        read_only_fields = fields


class ReceivableRecoverySerializer(serializers.ModelSerializer):
    class Meta:
        model = ReceivableRecovery
        fields = ("id", "receivable", "amount", "remarks", "recorded_at")
        read_only_fields = fields


class ReceivableCreateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField(required=False, allow_null=True)
    branch_id = serializers.IntegerField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    due_date = serializers.DateField(required=False, allow_null=True)


class ReceivableUpdateSerializer(serializers.Serializer):
    due_date = serializers.DateField(allow_null=True)


class RecoverySerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    remarks = serializers.CharField(required=False, allow_blank=True, default="")


class LedgerEntrySerializer(serializers.Serializer):
    id = serializers.CharField()
    type = serializers.CharField()
    date = serializers.DateField()
    description = serializers.CharField()
    credit = serializers.DecimalField(max_digits=14, decimal_places=2)
    debit = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class CustomerBalanceSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    contact = serializers.CharField()
    address = serializers.CharField()
    total_due = serializers.DecimalField(max_digits=14, decimal_places=2)
