# receivables/admin.py

from django.contrib import admin

from receivables.models import Receivable, ReceivableRecovery


class ReceivableRecoveryInline(admin.TabularInline):
    model = ReceivableRecovery
    extra = 0
    can_delete = False
    readonly_fields = ("amount", "remarks", "recorded_at")


@admin.register(Receivable)
class ReceivableAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer",
        "branch",
        "original_amount",
        "amount",
        "status",
        "due_date",
    )
    list_filter = ("status", "branch")
    readonly_fields = ("original_amount", "amount", "status", "sale", "created_at")
    inlines = [ReceivableRecoveryInline]
