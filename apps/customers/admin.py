from django.contrib import admin

from apps.customers.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'name', 'mobile', 'category',
        'total_due', 'last_transaction_date', 'is_active', 'created_at',
    )
    list_filter = ('category', 'is_active', 'created_at')
    search_fields = ('name', 'mobile')
    readonly_fields = ('total_due', 'last_transaction_date', 'created_at', 'updated_at')
