# cashbook/api/serializers.py

from rest_framework import serializers

from cashbook.models import CashEntry


def _amount(**kwargs):
    return serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True, **kwargs
    )


class CashEntrySerializer(serializers.ModelSerializer):
    branch_name = serializers.CharField(source="branch.name", read_only=True)
    expected_closing = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = CashEntry
        fields = (
            "id",
            "branch",
            "branch_name",
            "entry_date",
            "opening_cash",
            "sales_cash",
            "expense_cash",
            "bank_deposit",
            "bank_withdrawal",
            "closing_cash",
            "expected_closing",
            "difference",
            "remarks",
            "created_at",
            "updated_at",
        )


class CashEntryCreateSerializer(serializers.Serializer):
    branch_id = serializers.IntegerField()
    entry_date = serializers.DateField()
    opening_cash = _amount()
    sales_cash = _amount()
    expense_cash = _amount()
    bank_deposit = _amount()
    bank_withdrawal = _amount()
    closing_cash = _amount()
    remarks = serializers.CharField(required=False, allow_blank=True, default="")


class CashEntryUpdateSerializer(serializers.Serializer):
    opening_cash = _amount()
    sales_cash = _amount()
    expense_cash = _amount()
    bank_deposit = _amount()
    bank_withdrawal = _amount()
    closing_cash = _amount()
    remarks = serializers.CharField(required=False, allow_blank=True)
