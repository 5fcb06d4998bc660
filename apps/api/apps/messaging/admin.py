from django.contrib import admin
from .models import MessageTemplate, MessageLog


@admin.register(MessageTemplate)
class MessageTemplateAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'updated_at']
    list_filter = ['is_active']
    search_fields = ['name', 'body']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(MessageLog)
class MessageLogAdmin(admin.ModelAdmin):
    list_display = ['sent_at', 'status', 'patient_name', 'to_number', 'sent_by']
    list_filter = ['status']
    readonly_fields = ['id', 'sent_at']
    raw_id_fields = ['appointment', 'sent_by']
