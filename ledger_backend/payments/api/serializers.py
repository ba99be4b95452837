# payments/api/serializers.py

from rest_framework import serializers

from banking.api.serializers import BankSerializer
from payments.models import Payment, RentBill, SalaryRecord, StaffMember


class PaymentSerializer(serializers.ModelSerializer):
    bank_name = serializers.CharField(source="bank.name", read_only=True, default=None)
    reference_label = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = (
            "id",
            "category",
            "reference_type",
            "reference_id",
            "reference_label",
            "amount",
            "payment_date",
            "mode",
            "bank",
            "bank_name",
            "voucher_no",
            "remarks",
            "created_at",
        )
        read_only_fields = fields

    def get_reference_label(self, obj):
        labels = self.context.get("reference_labels") or {}
        return labels.get(obj.id, f"{obj.reference_type} #{obj.reference_id}")


class PaySerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=Payment.CATEGORY_CHOICES)
    reference_id = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    payment_date = serializers.DateField(required=False, allow_null=True)
    payment_method = serializers.CharField(required=False, default="cash")
    remarks = serializers.CharField(required=False, allow_blank=True, default="")


class RentBillSerializer(serializers.ModelSerializer):
    balance = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = RentBill
        fields = (
            "id",
            "title",
            "category",
            "amount",
            "paid_amount",
            "balance",
            "status",
            "due_date",
            "remarks",
            "created_at",
        )
        read_only_fields = ("id", "paid_amount", "balance", "status", "created_at")


class RentBillCreateSerializer(serializers.Serializer):
    title = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    category = serializers.CharField(required=False, allow_blank=True, default="bill")
    due_date = serializers.DateField(required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True, default="")


class StaffMemberSerializer(serializers.ModelSerializer):
    branch_name = serializers.CharField(source="branch.name", read_only=True, default=None)

    class Meta:
        model = StaffMember
        fields = (
            "id",
            "name",
            "branch",
            "branch_name",
            "fixed_salary",
            "commission_rate",
            "contact",
            "joined_date",
            "created_at",
        )
        read_only_fields = ("id", "created_at")


class SalaryRecordSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source="staff.name", read_only=True)

    class Meta:
        model = SalaryRecord
        fields = (
            "id",
            "staff",
            "staff_name",
            "month_year",
            "base_salary",
            "commission",
            "advances",
            "deductions",
            "net_salary",
            "status",
            "created_at",
        )
        read_only_fields = fields


class SalaryRecordCreateSerializer(serializers.Serializer):
    month_year = serializers.CharField(max_length=7)
    base_salary = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    commission = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, default="0.00"
    )
    advances = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, default="0.00"
    )
    deductions = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, default="0.00"
    )


class SalaryOptionSerializer(serializers.Serializer):
    record = SalaryRecordSerializer()
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2)


class PaymentOptionsSerializer(serializers.Serializer):
    rent_bills = RentBillSerializer(many=True)
    salaries = SalaryOptionSerializer(many=True)
    banks = BankSerializer(many=True)
