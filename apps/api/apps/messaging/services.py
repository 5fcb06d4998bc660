"""
Outbound messaging services.

Messages are delivered by opening a deep link in the messaging app on
the operator's device; this module renders the text, validates the
phone number, builds the link and records the history row.
"""
import logging
import re
from datetime import timedelta
from urllib.parse import quote, urlencode

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.clinical.models import Appointment, AppointmentStatusChoices
from apps.core.models import ClinicSettings
from apps.core.observability.events import log_message_rejected, log_message_sent
from .models import MessageLog, MessageStatusChoices, MessageTemplate

logger = logging.getLogger(__name__)

REMINDER_TEMPLATE_NAME = 'Reminder'
DEFAULT_REMINDER_BODY = (
    'Hello {patient_name}, this is a reminder that you have an appointment '
    'tomorrow with {doctor_name} at {time}. Clinic: {clinic_phone}'
)

MISSING_DOCTOR = 'Doctor not informed'
MISSING_DATE = 'Date not set'
MISSING_TIME = 'Time not set'

PLACEHOLDER = re.compile(r'\{(\w+)\}')


class MessagingError(Exception):
    """Raised when a message link cannot be built."""


def render_template(body, patient_name='', appointment=None, clinic_phone=''):
    """
    Substitute every placeholder occurrence in body.

    Without an appointment the doctor, date and time placeholders get a
    fixed "not informed/not set" text.
    """
    if appointment is not None:
        doctor_name = appointment.doctor.name
        date_text = appointment.date.strftime(settings.MESSAGING_DATE_FORMAT)
        time_text = appointment.time.strftime('%H:%M')
    else:
        doctor_name, date_text, time_text = MISSING_DOCTOR, MISSING_DATE, MISSING_TIME

    values = {
        'patient_name': patient_name or '',
        'doctor_name': doctor_name,
        'date': date_text,
        'time': time_text,
        'clinic_phone': clinic_phone or '',
    }
    # Unknown placeholders stay as written; substituted values are not rescanned.
    return PLACEHOLDER.sub(lambda match: values.get(match.group(1), match.group(0)), body)


def normalize_phone(phone, owner=''):
    """
    Digits of phone.

    Raises:
        MessagingError: no phone, or fewer digits than MESSAGING_MIN_PHONE_DIGITS
    """
    if not phone:
        raise MessagingError(f'{owner or "Recipient"} has no phone number.')

    digits = re.sub(r'\D', '', phone)
    if len(digits) < settings.MESSAGING_MIN_PHONE_DIGITS:
        raise MessagingError(f'Invalid phone number for {owner or "recipient"}: {phone}')
    return digits


def build_message_link(digits, text):
    query = urlencode(
        {'phone': f'{settings.MESSAGING_COUNTRY_CODE}{digits}', 'text': text},
        quote_via=quote,
    )
    return f'{settings.MESSAGING_LINK_BASE_URL}?{query}'


def send_message(*, patient, body, appointment=None, sent_by=None, channel='single'):
    """
    Render body for patient, build the link and log it as sent.

    Returns the MessageLog row; its link field is what the client opens.

    Raises:
        MessagingError: empty text or unusable patient phone
    """
    clinic = ClinicSettings.load()
    text = render_template(body, patient.name, appointment, clinic.whatsapp_number)

    if not text.strip():
        log_message_rejected(channel, 'empty_text')
        raise MessagingError('Message text is empty.')

    if len(text) > settings.MESSAGING_MAX_TEXT_LENGTH:
        log_message_rejected(channel, 'text_too_long', length=len(text))
        raise MessagingError(
            f'Message text is too long ({len(text)} characters, '
            f'maximum {settings.MESSAGING_MAX_TEXT_LENGTH}).'
        )

    try:
        digits = normalize_phone(patient.phone, patient.name)
    except MessagingError:
        log_message_rejected(
            channel, 'invalid_phone',
            appointment_id=str(appointment.id) if appointment else None,
        )
        raise

    message_log = MessageLog.objects.create(
        from_number=clinic.whatsapp_number,
        to_number=digits,
        patient_name=patient.name,
        message=text,
        link=build_message_link(digits, text),
        status=MessageStatusChoices.SENT,
        appointment=appointment,
        sent_by=sent_by,
    )
    log_message_sent(message_log, channel)
    return message_log


def reminder_body():
    template = MessageTemplate.objects.filter(name=REMINDER_TEMPLATE_NAME, is_active=True).first()
    return template.body if template else DEFAULT_REMINDER_BODY


@transaction.atomic
def send_bulk_reminders(date=None, body=None, sent_by=None):
    """
    One reminder per scheduled appointment on date (default: tomorrow).

    Each sent entry carries open_delay_ms so the client opens the links
    MESSAGING_BULK_DELAY_MS apart. Appointments whose patient has no
    usable phone are reported under skipped.
    """
    date = date or (timezone.localdate() + timedelta(days=1))
    body = body or reminder_body()

    appointments = Appointment.objects.select_related('patient', 'doctor').filter(
        date=date,
        status=AppointmentStatusChoices.SCHEDULED,
    ).order_by('time')

    sent = []
    skipped = []
    for appointment in appointments:
        try:
            message_log = send_message(
                patient=appointment.patient,
                body=body,
                appointment=appointment,
                sent_by=sent_by,
                channel='bulk_reminder',
            )
        except MessagingError as exc:
            skipped.append({
                'appointment_id': str(appointment.id),
                'patient_name': appointment.patient.name,
                'reason': str(exc),
            })
            continue

        sent.append({
            'appointment_id': str(appointment.id),
            'message_log_id': str(message_log.id),
            'patient_name': appointment.patient.name,
            'link': message_log.link,
            'open_delay_ms': len(sent) * settings.MESSAGING_BULK_DELAY_MS,
        })

    logger.info(
        'Bulk reminders generated',
        extra={'event': 'bulk_reminders', 'date': date.isoformat(), 'sent': len(sent), 'skipped': len(skipped)}
    )
    return {'date': date, 'sent': sent, 'skipped': skipped}


def send_test_message(sent_by=None):
    """
    Build a link to the clinic's own number and log it with status test.

    Raises:
        MessagingError: the clinic number is missing or too short
    """
    clinic = ClinicSettings.load()
    try:
        digits = normalize_phone(clinic.whatsapp_number, clinic.company_name)
    except MessagingError:
        log_message_rejected('test', 'invalid_phone')
        raise

    text = (
        f'Test message from {clinic.company_name}. '
        f'The messaging number is set up correctly.'
    )
    message_log = MessageLog.objects.create(
        from_number=clinic.whatsapp_number,
        to_number=digits,
        patient_name=clinic.company_name,
        message=text,
        link=build_message_link(digits, text),
        status=MessageStatusChoices.TEST,
        sent_by=sent_by,
    )
    log_message_sent(message_log, 'test')
    return message_log
