"""
Finance models: financial_record (the clinic ledger).
"""
import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import models


class FinancialKindChoices(models.TextChoices):
    """Ledger entry direction."""
    REVENUE = 'revenue', 'Revenue'
    EXPENSE = 'expense', 'Expense'


class FinancialStatusChoices(models.TextChoices):
    """
    Ledger entry status.

    Only paid entries count towards revenue, expenses and profit.
    """
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    CANCELED = 'canceled', 'Canceled'


class FinancialRecord(models.Model):
    """
    Revenue or expense entry.

    Booking an appointment creates a pending revenue entry linked to it;
    deleting the appointment deletes the linked entries.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kind = models.CharField(max_length=10, choices=FinancialKindChoices.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    description = models.CharField(max_length=255)
    category = models.CharField(max_length=100)
    date = models.DateField()
    status = models.CharField(
        max_length=10,
        choices=FinancialStatusChoices.choices,
        default=FinancialStatusChoices.PENDING
    )
    appointment = models.ForeignKey(
        'clinical.Appointment',
        on_delete=models.CASCADE,
        blank=True,
        null=True,
        related_name='financial_records'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'financial_record'
        verbose_name = 'Financial Record'
        verbose_name_plural = 'Financial Records'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['date'], name='idx_finrec_date'),
            models.Index(fields=['kind', 'status'], name='idx_finrec_kind_status'),
            models.Index(fields=['appointment'], name='idx_finrec_appointment'),
        ]

    def __str__(self):
        return f"{self.get_kind_display()} {self.amount} ({self.date})"
