# banking/api/serializers.py

from rest_framework import serializers

from banking.models import Bank, BankTransaction


class BankSerializer(serializers.ModelSerializer):
    # Only present on querysets built with bank_ledger.with_balances()
    current_balance = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = Bank
        fields = (
            "id",
            "name",
            "account_number",
            "opening_balance",
            "current_balance",
            "created_at",
        )
        read_only_fields = ("id", "created_at")


class BankTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = BankTransaction
        fields = "__all__"


class BankTransactionCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=BankTransaction.TYPE_CHOICES)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    transaction_date = serializers.DateField(required=False, allow_null=True)
    # room for the "<voucher> - " prefix
    reference = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=200
    )
    description = serializers.CharField(required=False, allow_blank=True, default="")


class BankTransferSerializer(serializers.Serializer):
    from_bank_id = serializers.IntegerField()
    to_bank_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    transaction_date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ReconciliationRowSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    transaction_date = serializers.DateField()
    type = serializers.CharField()
    reference = serializers.CharField()
    description = serializers.CharField()
    debit = serializers.DecimalField(max_digits=14, decimal_places=2)
    credit = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
