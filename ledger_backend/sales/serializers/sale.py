# sales/serializers/sale.py

from django.core.files.storage import default_storage
from rest_framework import serializers

from sales.models import Sale, SaleAttachment, SaleBankSplit

SALE_FIELDS = [
    "id",
    "branch",
    "branch_name",
    "customer",
    "customer_name",
    "bank",
    "sale_date",
    "sale_type",
    "cash_amount",
    "bank_amount",
    "credit_amount",
    "discount",
    "returns_amount",
    "net_sales",
    "remarks",
    "voucher_no",
    "is_locked",
    "created_by",
    "created_at",
    "updated_at",
]


class SaleBankSplitSerializer(serializers.ModelSerializer):
    bank_name = serializers.CharField(source="bank.name", read_only=True)

    class Meta:
        model = SaleBankSplit
        fields = ["id", "bank", "bank_name", "amount"]
        read_only_fields = fields


class SaleAttachmentSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = SaleAttachment
        fields = ["id", "filename", "path", "url", "created_at"]
        read_only_fields = fields

    def get_url(self, obj):
        return default_storage.url(obj.path) if obj.path else None


class SaleSerializer(serializers.ModelSerializer):
    """
    List row. bank_split_label reads "Bank A:200, Bank B:300".
    """

    branch_name = serializers.CharField(source="branch.name", read_only=True, default=None)
    customer_name = serializers.CharField(
        source="customer.name", read_only=True, default=None
    )
    bank_split_label = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = SALE_FIELDS + ["bank_split_label"]
        read_only_fields = fields

    def get_bank_split_label(self, obj):
        splits = obj.bank_splits.all()
        if not splits:
            return None
        return ", ".join(f"{s.bank.name}:{s.amount:.0f}" for s in splits)


class SaleDetailSerializer(serializers.ModelSerializer):
    branch_name = serializers.CharField(source="branch.name", read_only=True, default=None)
    customer_name = serializers.CharField(
        source="customer.name", read_only=True, default=None
    )
    bank_splits = SaleBankSplitSerializer(many=True, read_only=True)
    attachments = SaleAttachmentSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = SALE_FIELDS + ["bank_splits", "attachments"]
        read_only_fields = fields


# ============================================================
# INPUT
# ============================================================


class BankSplitInputSerializer(serializers.Serializer):
    # Invalid legs are dropped by the service, so accept loosely here
    bank_id = serializers.IntegerField(required=False, allow_null=True)
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )


class SaleCreateSerializer(serializers.Serializer):
    branch_id = serializers.IntegerField(required=False, allow_null=True)
    customer_id = serializers.IntegerField(required=False, allow_null=True)
    bank_id = serializers.IntegerField(required=False, allow_null=True)
    sale_date = serializers.DateField(required=False, allow_null=True)
    type = serializers.ChoiceField(
        choices=Sale.TYPE_CHOICES, required=False, source="sale_type"
    )
    cash_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    bank_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    credit_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    discount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    returns_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    due_date = serializers.DateField(required=False, allow_null=True)
    bank_splits = BankSplitInputSerializer(many=True, required=False)


class SaleUpdateSerializer(SaleCreateSerializer):
    """
    Same fields as create; only the keys present in the request are applied.
    """


class SaleLockSerializer(serializers.Serializer):
    lock = serializers.BooleanField(required=False, default=True)
