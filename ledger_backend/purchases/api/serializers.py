# purchases/api/serializers.py

from rest_framework import serializers

from payments.models import Payment
from purchases.models import Purchase, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ("id", "name", "contact", "address", "created_at")
        read_only_fields = ("id", "created_at")


class PurchaseSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    branch_name = serializers.CharField(source="branch.name", read_only=True, default=None)

    class Meta:
        model = Purchase
        fields = (
            "id",
            "supplier",
            "supplier_name",
            "branch",
            "branch_name",
            "invoice_no",
            "purchase_date",
            "due_date",
            "total_amount",
            "paid_amount",
            "balance",
            "remarks",
            "created_at",
        )
        read_only_fields = fields


class PurchaseCreateSerializer(serializers.Serializer):
    supplier_id = serializers.IntegerField()
    branch_id = serializers.IntegerField(required=False, allow_null=True)
    invoice_no = serializers.CharField(required=False, allow_blank=True, default="")
    purchase_date = serializers.DateField(required=False, allow_null=True)
    due_date = serializers.DateField(required=False, allow_null=True)
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, default="0.00"
    )
    remarks = serializers.CharField(required=False, allow_blank=True, default="")


class PurchaseUpdateSerializer(serializers.Serializer):
    supplier_id = serializers.IntegerField(required=False)
    branch_id = serializers.IntegerField(required=False, allow_null=True)
    invoice_no = serializers.CharField(required=False, allow_blank=True)
    purchase_date = serializers.DateField(required=False)
    due_date = serializers.DateField(required=False, allow_null=True)
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    remarks = serializers.CharField(required=False, allow_blank=True)


class PurchasePaySerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    payment_method = serializers.CharField(required=False, default="cash")
    payment_date = serializers.DateField(required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True, default="")


class SupplierPaymentSerializer(serializers.ModelSerializer):
    bank_name = serializers.CharField(source="bank.name", read_only=True, default=None)

    class Meta:
        model = Payment
        fields = (
            "id",
            "amount",
            "payment_date",
            "mode",
            "bank",
            "bank_name",
            "voucher_no",
            "remarks",
        )
        read_only_fields = fields


class DueReminderSerializer(serializers.Serializer):
    purchase = PurchaseSerializer()
    days_left = serializers.IntegerField()
    flag = serializers.CharField()


class SupplierSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    invoice_count = serializers.IntegerField()
    total_purchases = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
