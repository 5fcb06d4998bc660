"""
Clinical models: appointment, medical_record, absence_justification.

Patients and doctors are accounts (authz.User) with role patient and
clinician respectively.
"""
import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models


class AppointmentStatusChoices(models.TextChoices):
    """
    Appointment status.

    Any status may move to any other status. Every status except
    canceled holds the doctor's slot.
    """
    SCHEDULED = 'scheduled', 'Scheduled'
    CONFIRMED = 'confirmed', 'Confirmed'
    COMPLETED = 'completed', 'Completed'
    CANCELED = 'canceled', 'Canceled'


DEFAULT_APPOINTMENT_TYPE = 'consultation'


class Appointment(models.Model):
    """
    One visit of a patient to a doctor at a calendar date and time of day.

    BUSINESS RULE: at most one non-canceled appointment per
    (doctor, date, time). Enforced by apps.clinical.services on every
    write and by the partial unique constraint below.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Accounts with appointments cannot be hard-deleted
    patient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='patient_appointments'
    )
    doctor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='doctor_appointments'
    )
    date = models.DateField()
    time = models.TimeField()
    status = models.CharField(
        max_length=20,
        choices=AppointmentStatusChoices.choices,
        default=AppointmentStatusChoices.SCHEDULED
    )
    appointment_type = models.CharField(max_length=100, default=DEFAULT_APPOINTMENT_TYPE)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointment'
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'
        ordering = ['date', 'time']
        indexes = [
            models.Index(fields=['patient'], name='idx_appointment_patient'),
            models.Index(fields=['doctor', 'date'], name='idx_appointment_doctor_date'),
            models.Index(fields=['date'], name='idx_appointment_date'),
            models.Index(fields=['status'], name='idx_appointment_status'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['doctor', 'date', 'time'],
                condition=~models.Q(status='canceled'),
                name='uniq_appointment_active_slot',
            ),
        ]

    def __str__(self):
        return f"Appointment {self.date} {self.time:%H:%M} - {self.patient_id}"

    @property
    def holds_slot(self):
        return self.status != AppointmentStatusChoices.CANCELED


class MedicalRecord(models.Model):
    """
    Clinical note written by a doctor about a patient.

    Not linked to an appointment.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='patient_medical_records'
    )
    doctor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='doctor_medical_records'
    )
    date = models.DateField()
    diagnosis = models.TextField()
    treatment = models.TextField()
    notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medical_record'
        verbose_name = 'Medical Record'
        verbose_name_plural = 'Medical Records'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['patient'], name='idx_medrec_patient'),
            models.Index(fields=['doctor'], name='idx_medrec_doctor'),
            models.Index(fields=['date'], name='idx_medrec_date'),
        ]

    def __str__(self):
        return f"Medical record {self.date} - {self.patient_id}"


class AbsenceReasonChoices(models.TextChoices):
    """Why a doctor missed an appointment."""
    ILLNESS = 'illness', 'Illness'
    FAMILY_EMERGENCY = 'family_emergency', 'Family emergency'
    MEDICAL_COMMITMENT = 'medical_commitment', 'Medical commitment'
    CONGRESS = 'congress', 'Congress or course'
    TRANSPORT = 'transport', 'Transport problem'
    OTHER = 'other', 'Other'


class AbsenceJustification(models.Model):
    """
    Doctor's justification for missing an appointment.

    Recording one cancels the appointment.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    appointment = models.ForeignKey(
        Appointment,
        on_delete=models.CASCADE,
        related_name='absence_justifications'
    )
    doctor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='absence_justifications'
    )
    reason = models.CharField(max_length=30, choices=AbsenceReasonChoices.choices)
    description = models.TextField(validators=[MinLengthValidator(10)])
    date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'absence_justification'
        verbose_name = 'Absence Justification'
        verbose_name_plural = 'Absence Justifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['doctor'], name='idx_absence_doctor'),
        ]

    def __str__(self):
        return f"Absence {self.date} - {self.get_reason_display()}"
