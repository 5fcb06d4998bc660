"""
Appointment scheduling services.

Every appointment write goes through this module so the slot rule
(one non-canceled appointment per doctor, date and time) is checked in
one place. Views translate SlotConflictError into HTTP 409.
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.clinical.models import (
    AbsenceJustification,
    Appointment,
    AppointmentStatusChoices,
)
from apps.core.observability.events import (
    log_appointment_written,
    log_financial_record_created,
    log_slot_conflict,
)
from apps.finance.models import (
    FinancialRecord,
    FinancialKindChoices,
    FinancialStatusChoices,
)

logger = logging.getLogger(__name__)

CONSULTATION_CATEGORY = 'Consultation'
SLOT_STEP_MINUTES = 30


class SlotConflictError(Exception):
    """Raised when a write would put two live appointments in one slot."""

    def __init__(self, blocking: Appointment):
        self.blocking = blocking
        super().__init__(
            f"{blocking.doctor.name} already has an appointment with "
            f"{blocking.patient.name} on {blocking.date.isoformat()} "
            f"at {blocking.time:%H:%M}."
        )


def find_slot_conflict(doctor_id, date, time, exclude_id=None) -> Optional[Appointment]:
    """
    Return the appointment holding (doctor, date, time), or None.

    Canceled appointments never hold a slot. exclude_id skips the
    appointment being edited so it does not conflict with itself.
    """
    qs = Appointment.objects.select_related('patient', 'doctor').filter(
        doctor_id=doctor_id,
        date=date,
        time=time,
    ).exclude(status=AppointmentStatusChoices.CANCELED)

    if exclude_id:
        qs = qs.exclude(id=exclude_id)

    return qs.order_by('created_at').first()


def is_slot_available(doctor_id, date, time, exclude_id=None) -> bool:
    return find_slot_conflict(doctor_id, date, time, exclude_id=exclude_id) is None


def free_slots(doctor_id, date, start, end, step_minutes=SLOT_STEP_MINUTES):
    """
    Times of day between start and end (inclusive) not held for doctor on date.

    Used by the scheduling grid to offer bookable times.
    """
    taken = set(
        Appointment.objects.filter(doctor_id=doctor_id, date=date)
        .exclude(status=AppointmentStatusChoices.CANCELED)
        .values_list('time', flat=True)
    )

    slots = []
    current = datetime.combine(date, start)
    last = datetime.combine(date, end)
    while current <= last:
        if current.time() not in taken:
            slots.append(current.time())
        current += timedelta(minutes=step_minutes)
    return slots


def _ensure_slot_free(operation, doctor_id, date, time, exclude_id=None):
    blocking = find_slot_conflict(doctor_id, date, time, exclude_id=exclude_id)
    if blocking is not None:
        log_slot_conflict(operation, doctor_id, date, time, blocking.id)
        raise SlotConflictError(blocking)


def _save_guarded(appointment, operation, **save_kwargs):
    """
    Save inside a savepoint; a unique-constraint race becomes SlotConflictError.
    """
    try:
        with transaction.atomic():
            appointment.save(**save_kwargs)
    except IntegrityError:
        blocking = find_slot_conflict(
            appointment.doctor_id, appointment.date, appointment.time,
            exclude_id=appointment.pk if not appointment._state.adding else None
        )
        if blocking is None:
            raise
        log_slot_conflict(operation, appointment.doctor_id, appointment.date, appointment.time, blocking.id)
        raise SlotConflictError(blocking)


@transaction.atomic
def create_appointment(
    *,
    patient,
    doctor,
    date,
    time,
    status=AppointmentStatusChoices.SCHEDULED,
    appointment_type='consultation',
    price=Decimal('0.00'),
    notes='',
):
    """
    Book an appointment and its pending revenue record.

    Both rows are written in one transaction; a slot conflict leaves
    neither behind.

    Raises:
        SlotConflictError: the slot is held by another live appointment
    """
    if status != AppointmentStatusChoices.CANCELED:
        _ensure_slot_free('create', doctor.id, date, time)

    appointment = Appointment(
        patient=patient,
        doctor=doctor,
        date=date,
        time=time,
        status=status,
        appointment_type=appointment_type,
        price=price,
        notes=notes,
    )
    _save_guarded(appointment, 'create')

    record = FinancialRecord.objects.create(
        kind=FinancialKindChoices.REVENUE,
        amount=price,
        description=f'{CONSULTATION_CATEGORY} - {appointment_type}',
        category=CONSULTATION_CATEGORY,
        date=date,
        status=FinancialStatusChoices.PENDING,
        appointment=appointment,
    )

    log_appointment_written(appointment, 'create', financial_record_id=str(record.id))
    log_financial_record_created(record, source='appointment')
    return appointment


@transaction.atomic
def update_appointment(appointment, **changes):
    """
    Apply field changes to an appointment.

    The slot is re-checked whenever the result holds a slot, which covers
    moving doctor/date/time, status changes and reactivation from
    canceled. The linked revenue record is not touched, so a price change
    does not reach the ledger.

    Raises:
        SlotConflictError: the target slot is held by another live appointment
    """
    for field, value in changes.items():
        setattr(appointment, field, value)

    if appointment.holds_slot:
        _ensure_slot_free(
            'update', appointment.doctor_id, appointment.date, appointment.time,
            exclude_id=appointment.id
        )

    _save_guarded(appointment, 'update')
    log_appointment_written(appointment, 'update', fields=sorted(changes))
    return appointment


@transaction.atomic
def transition_appointment(appointment, new_status, reason=None):
    """
    Move an appointment to any status.

    There is no transition table; leaving canceled re-checks the slot.
    A reason is appended to the notes.
    """
    from_status = appointment.status

    if new_status != AppointmentStatusChoices.CANCELED:
        _ensure_slot_free(
            'transition', appointment.doctor_id, appointment.date, appointment.time,
            exclude_id=appointment.id
        )

    appointment.status = new_status
    if reason:
        appointment.notes = f'{appointment.notes}\n{reason}'.strip()

    _save_guarded(appointment, 'transition', update_fields=['status', 'notes', 'updated_at'])
    log_appointment_written(appointment, 'transition', from_status=from_status, to_status=new_status)
    return appointment


@transaction.atomic
def delete_appointment(appointment):
    """
    Delete an appointment together with its linked financial records.

    Returns the number of financial records removed.
    """
    removed, _ = FinancialRecord.objects.filter(appointment=appointment).delete()
    log_appointment_written(appointment, 'delete', financial_records_removed=removed)
    appointment.delete()
    return removed


@transaction.atomic
def confirm_all(date=None):
    """
    Confirm every scheduled appointment, optionally for one date only.

    Status changes between scheduled and confirmed keep the slot, so no
    conflict check is needed. Returns the number confirmed.
    """
    qs = Appointment.objects.filter(status=AppointmentStatusChoices.SCHEDULED)
    if date is not None:
        qs = qs.filter(date=date)

    count = qs.update(status=AppointmentStatusChoices.CONFIRMED, updated_at=timezone.now())

    logger.info(
        'Scheduled appointments confirmed',
        extra={'event': 'appointments_confirm_all', 'count': count, 'date': str(date) if date else None}
    )
    return count


@transaction.atomic
def justify_absence(appointment, doctor, reason, description, date=None):
    """
    Record a doctor's absence and cancel the appointment.

    The note appended to the appointment reads
    "Absence justified: <reason> - <description>".
    """
    justification = AbsenceJustification(
        appointment=appointment,
        doctor=doctor,
        reason=reason,
        description=description,
        date=date or appointment.date,
    )
    justification.save()

    note = f'Absence justified: {justification.get_reason_display()} - {description}'
    appointment.status = AppointmentStatusChoices.CANCELED
    appointment.notes = f'{appointment.notes}\n{note}'.strip() if appointment.notes else note
    appointment.save(update_fields=['status', 'notes', 'updated_at'])

    log_appointment_written(appointment, 'transition', to_status=AppointmentStatusChoices.CANCELED,
                            absence_justification_id=str(justification.id))
    return justification
