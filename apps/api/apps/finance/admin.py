from django.contrib import admin
from .models import FinancialRecord


@admin.register(FinancialRecord)
class FinancialRecordAdmin(admin.ModelAdmin):
    list_display = ['date', 'kind', 'amount', 'category', 'status', 'appointment']
    list_filter = ['kind', 'status', 'date']
    search_fields = ['description', 'category']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['appointment']
