# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleAttachment, SaleBankSplit


class SaleBankSplitInline(admin.TabularInline):
    model = SaleBankSplit
    extra = 0
    can_delete = False
    readonly_fields = ("bank", "amount")


class SaleAttachmentInline(admin.TabularInline):
    model = SaleAttachment
    extra = 0
    readonly_fields = ("filename", "path", "created_at")


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """
    Read-mostly: amounts and side effects are owned by sale_service.
    """

    list_display = (
        "id",
        "sale_date",
        "branch",
        "sale_type",
        "net_sales",
        "voucher_no",
        "is_locked",
    )
    list_filter = ("sale_type", "is_locked", "branch")
    search_fields = ("voucher_no", "remarks")
    readonly_fields = (
        "cash_amount",
        "bank_amount",
        "credit_amount",
        "discount",
        "returns_amount",
        "net_sales",
        "voucher_no",
        "is_locked",
        "created_by",
        "created_at",
        "updated_at",
    )
    inlines = [SaleBankSplitInline, SaleAttachmentInline]
