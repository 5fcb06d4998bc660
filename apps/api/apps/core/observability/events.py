"""
Domain events logging helpers.

Provides structured event logging for business operations.
"""
from typing import Dict, Optional
from .logging import get_sanitized_logger, sanitize_dict
from .metrics import metrics

logger = get_sanitized_logger(__name__)


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_ids: Optional[Dict[str, str]] = None,
    result: str = 'success',
    **extra_fields
):
    """
    Log a domain event with structured data.

    Args:
        event_name: Name of the event (e.g., 'appointment_created', 'message_sent')
        entity_type: Type of entity (e.g., 'Appointment', 'MessageLog')
        entity_id: ID of primary entity
        entity_ids: Dictionary of related entity IDs
        result: Result of operation (success, failure, blocked, ...)
        **extra_fields: Additional fields to log (will be sanitized)

    Example:
        log_domain_event(
            'appointment_created',
            entity_type='Appointment',
            entity_id=str(appointment.id),
            entity_ids={'doctor_id': str(appointment.doctor_id)},
            status='scheduled',
        )
    """
    event_data = {
        'event': event_name,
        'result': result,
    }

    if entity_type:
        event_data['entity_type'] = entity_type

    if entity_id:
        event_data['entity_id'] = entity_id

    if entity_ids:
        event_data.update(entity_ids)

    event_data.update(sanitize_dict(extra_fields))

    if result in ['failure', 'error']:
        logger.error(f'Domain event: {event_name}', extra=event_data)
    elif result in ['warning', 'blocked']:
        logger.warning(f'Domain event: {event_name}', extra=event_data)
    else:
        logger.info(f'Domain event: {event_name}', extra=event_data)


def _appointment_ids(appointment):
    return {
        'appointment_id': str(appointment.id),
        'doctor_id': str(appointment.doctor_id),
        'patient_id': str(appointment.patient_id),
    }


def log_appointment_written(appointment, operation, **extra):
    """Log a successful appointment create/update/transition/delete."""
    metrics.appointments_written_total.labels(operation=operation, result='success').inc()
    log_domain_event(
        f'appointment_{operation}',
        entity_type='Appointment',
        entity_id=str(appointment.id),
        entity_ids=_appointment_ids(appointment),
        status=appointment.status,
        **extra
    )


def log_slot_conflict(operation, doctor_id, date, time, blocking_appointment_id):
    """Log a write rejected because the slot is held by another appointment."""
    metrics.appointment_slot_conflicts_total.labels(operation=operation).inc()
    metrics.appointments_written_total.labels(operation=operation, result='blocked').inc()
    log_domain_event(
        'appointment_slot_conflict',
        entity_type='Appointment',
        entity_ids={
            'doctor_id': str(doctor_id),
            'blocking_appointment_id': str(blocking_appointment_id),
        },
        result='blocked',
        operation=operation,
        date=str(date),
        time=str(time),
    )


def log_financial_record_created(record, source='manual'):
    """Log financial record creation."""
    metrics.financial_records_created_total.labels(kind=record.kind, source=source).inc()
    entity_ids = {'financial_record_id': str(record.id)}
    if record.appointment_id:
        entity_ids['appointment_id'] = str(record.appointment_id)
    log_domain_event(
        'financial_record_created',
        entity_type='FinancialRecord',
        entity_id=str(record.id),
        entity_ids=entity_ids,
        kind=record.kind,
        status=record.status,
        source=source,
    )


def log_message_sent(message_log, channel):
    """Log an outbound message link (delivery is never confirmed)."""
    metrics.messages_total.labels(channel=channel, result='success').inc()
    entity_ids = {'message_log_id': str(message_log.id)}
    if message_log.appointment_id:
        entity_ids['appointment_id'] = str(message_log.appointment_id)
    log_domain_event(
        'message_link_generated',
        entity_type='MessageLog',
        entity_id=str(message_log.id),
        entity_ids=entity_ids,
        channel=channel,
        status=message_log.status,
    )


def log_message_rejected(channel, reason, **extra):
    """Log a message that could not be built (bad phone, empty text...)."""
    metrics.messages_total.labels(channel=channel, result='failure').inc()
    log_domain_event(
        'message_rejected',
        entity_type='MessageLog',
        result='blocked',
        channel=channel,
        reason=reason,
        **extra
    )


def log_account_event(event_name, user, actor=None, result='success', **extra):
    """Log account administration and authentication events."""
    entity_ids = {'target_user_id': str(user.id)}
    if actor is not None:
        entity_ids['actor_user_id'] = str(actor.id)
    log_domain_event(
        event_name,
        entity_type='User',
        entity_id=str(user.id),
        entity_ids=entity_ids,
        result=result,
        role=user.role,
        **extra
    )
