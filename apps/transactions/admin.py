from django.contrib import admin

from apps.transactions.models import Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'customer', 'kind', 'amount', 'date',
        'status', 'payment_method', 'created_at',
    )
    list_filter = ('kind', 'status', 'payment_method', 'date')
    search_fields = ('customer__name', 'customer__mobile', 'description')
    readonly_fields = ('kind', 'amount', 'status', 'created_at', 'updated_at')
    raw_id_fields = ('customer',)
