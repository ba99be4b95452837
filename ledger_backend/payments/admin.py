# payments/admin.py

from django.contrib import admin

from payments.models import Payment, RentBill, SalaryRecord, StaffMember


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "voucher_no",
        "category",
        "reference_type",
        "reference_id",
        "amount",
        "mode",
        "bank",
        "payment_date",
    )
    list_filter = ("category", "mode")
    search_fields = ("voucher_no", "remarks")

    # Audit rows: read-only in admin
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(RentBill)
class RentBillAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "amount", "paid_amount", "status", "due_date")
    list_filter = ("status", "category")
    readonly_fields = ("paid_amount", "status")


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ("name", "branch", "fixed_salary", "commission_rate")
    search_fields = ("name",)


@admin.register(SalaryRecord)
class SalaryRecordAdmin(admin.ModelAdmin):
    list_display = ("staff", "month_year", "net_salary", "status")
    list_filter = ("status", "month_year")
    readonly_fields = ("net_salary", "status")
