# purchases/admin.py

from django.contrib import admin

from purchases.models import Purchase, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "contact", "created_at")
    search_fields = ("name", "contact")


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_no",
        "supplier",
        "branch",
        "purchase_date",
        "due_date",
        "total_amount",
        "paid_amount",
        "balance",
    )
    list_filter = ("branch",)
    search_fields = ("invoice_no", "supplier__name")
    readonly_fields = ("balance", "created_at")
