from django.contrib import admin
from .models import Appointment, MedicalRecord, AbsenceJustification


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['date', 'time', 'doctor', 'patient', 'status', 'appointment_type', 'price']
    list_filter = ['status', 'date']
    search_fields = ['patient__name', 'doctor__name', 'appointment_type']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['patient', 'doctor']

    fieldsets = (
        ('Slot', {
            'fields': ('id', 'doctor', 'date', 'time', 'status')
        }),
        ('Patient', {
            'fields': ('patient', 'appointment_type', 'price')
        }),
        ('Notes', {
            'fields': ('notes',)
        }),
        ('Audit', {
            'fields': ('created_at', 'updated_at')
        }),
    )


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ['date', 'patient', 'doctor', 'created_at']
    list_filter = ['date']
    search_fields = ['patient__name', 'doctor__name']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['patient', 'doctor']


@admin.register(AbsenceJustification)
class AbsenceJustificationAdmin(admin.ModelAdmin):
    list_display = ['date', 'doctor', 'reason', 'appointment', 'created_at']
    list_filter = ['reason']
    readonly_fields = ['id', 'created_at']
    raw_id_fields = ['appointment', 'doctor']
