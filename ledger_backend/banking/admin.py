# banking/admin.py

from django.contrib import admin

from banking.models import Bank, BankTransaction


@admin.register(Bank)
class BankAdmin(admin.ModelAdmin):
    list_display = ("name", "account_number", "opening_balance", "created_at")
    search_fields = ("name", "account_number")


@admin.register(BankTransaction)
class BankTransactionAdmin(admin.ModelAdmin):
    list_display = ("bank", "type", "amount", "transaction_date", "reference")
    list_filter = ("type", "transaction_date")
    search_fields = ("reference", "description")
    readonly_fields = ("created_at",)
