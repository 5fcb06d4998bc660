"""
Messaging models: message_template, message_log

Outbound messages are deep links the client opens in the messaging app;
delivery is never confirmed, so a log row only records that a link was
generated.
"""
import uuid
from django.conf import settings
from django.db import models


class MessageTemplate(models.Model):
    """
    Reusable message text.

    Placeholders: {patient_name}, {doctor_name}, {date}, {time},
    {clinic_phone}.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    body = models.TextField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'message_template'
        verbose_name = 'Message Template'
        verbose_name_plural = 'Message Templates'
        ordering = ['name']

    def __str__(self):
        return self.name


class MessageStatusChoices(models.TextChoices):
    SENT = 'sent', 'Sent'
    TEST = 'test', 'Test'


class MessageLog(models.Model):
    """
    Message history entry.

    Recorded when a link is generated (status sent) or when the clinic
    number is tested (status test).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    from_number = models.CharField(max_length=30, blank=True, default='')
    to_number = models.CharField(max_length=30)
    patient_name = models.CharField(max_length=255, blank=True, default='')
    message = models.TextField()
    link = models.TextField(blank=True, default='')
    status = models.CharField(
        max_length=10,
        choices=MessageStatusChoices.choices,
        default=MessageStatusChoices.SENT
    )
    appointment = models.ForeignKey(
        'clinical.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='message_logs'
    )
    sent_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sent_messages'
    )
    sent_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'message_log'
        verbose_name = 'Message Log'
        verbose_name_plural = 'Message Logs'
        ordering = ['-sent_at']
        indexes = [
            models.Index(fields=['sent_at'], name='idx_message_log_sent_at'),
            models.Index(fields=['appointment'], name='idx_message_log_appointment'),
        ]

    def __str__(self):
        return f"{self.status} to {self.to_number} at {self.sent_at}"
