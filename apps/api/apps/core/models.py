"""
Core models: clinic_settings, service
"""
import uuid
from datetime import time
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


DEFAULT_COMPANY_NAME = 'Neuro Integrar'
DEFAULT_WHATSAPP_NUMBER = '98974003414'
DEFAULT_WORKING_HOURS_START = time(8, 0)
DEFAULT_WORKING_HOURS_END = time(21, 0)


class ClinicSettings(models.Model):
    """
    Clinic-wide settings (single row).

    Holds the company identity shown on documents and messages, the
    number outbound messages are sent from and the working hours that
    bound the scheduling grid.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company_name = models.CharField(max_length=255, default=DEFAULT_COMPANY_NAME)
    company_address = models.CharField(max_length=500, blank=True, default='')
    company_phone = models.CharField(max_length=30, blank=True, default='')
    company_email = models.EmailField(max_length=255, blank=True, default='')
    whatsapp_number = models.CharField(max_length=30, blank=True, default=DEFAULT_WHATSAPP_NUMBER)
    logo_url = models.URLField(max_length=500, blank=True, default='')
    working_hours_start = models.TimeField(default=DEFAULT_WORKING_HOURS_START)
    working_hours_end = models.TimeField(default=DEFAULT_WORKING_HOURS_END)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clinic_settings'
        verbose_name = 'Clinic Settings'
        verbose_name_plural = 'Clinic Settings'

    def __str__(self):
        return f"Clinic Settings ({self.company_name})"

    def clean(self):
        if self.working_hours_start >= self.working_hours_end:
            raise ValidationError({'working_hours_end': 'Working hours must end after they start.'})

    @classmethod
    def load(cls):
        """Return the settings row, creating it with defaults on first use."""
        instance = cls.objects.order_by('created_at').first()
        if instance is None:
            instance = cls.objects.create()
        return instance


class Service(models.Model):
    """
    Service catalog entry (consultation types offered by the clinic).

    Services are disabled through is_active rather than deleted so
    historical appointment types keep their meaning.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    duration_minutes = models.PositiveIntegerField(default=30)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'service'
        verbose_name = 'Service'
        verbose_name_plural = 'Services'
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_active'], name='idx_service_active'),
        ]

    def __str__(self):
        return f"{self.name} ({self.duration_minutes} min)"
