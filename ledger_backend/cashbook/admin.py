# cashbook/admin.py

from django.contrib import admin

from cashbook.models import CashEntry


@admin.register(CashEntry)
class CashEntryAdmin(admin.ModelAdmin):
    list_display = (
        "branch",
        "entry_date",
        "opening_cash",
        "closing_cash",
        "difference",
    )
    list_filter = ("branch", "entry_date")
    readonly_fields = ("difference", "created_at", "updated_at")
