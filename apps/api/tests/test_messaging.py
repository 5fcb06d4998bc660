"""
Tests for outbound message links, bulk reminders and message history.
"""
from datetime import date, time, timedelta
from urllib.parse import parse_qs, urlparse

import pytest
from django.utils import timezone
from rest_framework import status

from apps.core.models import ClinicSettings
from apps.messaging import services
from apps.messaging.models import MessageLog, MessageTemplate


SEND = '/api/v1/messaging/send/'
REMINDERS = '/api/v1/messaging/reminders/'
TEST = '/api/v1/messaging/test/'
HISTORY = '/api/v1/messaging/history/'
TEMPLATES = '/api/v1/messaging/templates/'


def link_params(link):
    parsed = urlparse(link)
    return parsed, {key: values[0] for key, values in parse_qs(parsed.query).items()}


class TestRenderTemplate:

    def test_every_occurrence_is_replaced(self):
        text = services.render_template(
            '{patient_name}, {patient_name}! Call {clinic_phone}.',
            patient_name='Maria',
            clinic_phone='98974003414',
        )

        assert text == 'Maria, Maria! Call 98974003414.'

    def test_missing_appointment_data(self):
        text = services.render_template('{doctor_name} | {date} | {time}', patient_name='Maria')

        assert text == 'Doctor not informed | Date not set | Time not set'

    def test_unknown_braces_are_left_alone(self):
        assert services.render_template('Hi {nickname}', patient_name='Maria') == 'Hi {nickname}'

    def test_substituted_values_are_not_expanded_again(self):
        text = services.render_template('Hi {patient_name}', patient_name='Joe {doctor_name}')

        assert text == 'Hi Joe {doctor_name}'


class TestPhoneAndLink:

    def test_normalize_phone_keeps_digits(self):
        assert services.normalize_phone('(98) 98888-7777') == '98988887777'

    @pytest.mark.parametrize('phone', ['', None, '98 8888'])
    def test_short_or_missing_phone_is_rejected(self, phone):
        with pytest.raises(services.MessagingError):
            services.normalize_phone(phone, 'Maria')

    def test_link_carries_country_code_and_encoded_text(self):
        link = services.build_message_link('98988887777', 'Olá & até logo')

        parsed, params = link_params(link)
        assert f'{parsed.scheme}://{parsed.netloc}{parsed.path}' == 'https://api.whatsapp.com/send'
        assert params['phone'] == '5598988887777'
        assert params['text'] == 'Olá & até logo'
        assert ' ' not in link


@pytest.mark.django_db
class TestSendMessage:
    """Test POST /api/v1/messaging/send/"""

    def test_send_for_appointment(self, scheduling_client, appointment, scheduling_user):
        template = MessageTemplate.objects.get(name='Confirmation')

        response = scheduling_client.post(
            SEND, {'appointment': str(appointment.id), 'template': str(template.id)}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        _, params = link_params(response.data['link'])
        assert params['phone'] == '5598988887777'
        assert params['text'] == (
            'Hello Maria Silva, your appointment with Dr. Ana Souza is confirmed '
            'for 20/12/2024 at 09:00. Clinic: 98974003414'
        )

        log = MessageLog.objects.get()
        assert log.status == 'sent'
        assert log.appointment == appointment
        assert log.sent_by == scheduling_user
        assert log.to_number == '98988887777'

    def test_free_text_to_patient(self, admin_client, patient):
        response = admin_client.post(
            SEND, {'patient': str(patient.id), 'text': 'Hi {patient_name}, see {doctor_name}'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message']['message'] == 'Hi Maria Silva, see Doctor not informed'

    def test_patient_without_phone_returns_400(self, admin_client, other_patient):
        other_patient.phone = ''
        other_patient.save()

        response = admin_client.post(
            SEND, {'patient': str(other_patient.id), 'text': 'Hello'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'phone' in response.data['error']
        assert not MessageLog.objects.exists()

    def test_text_over_limit_returns_400(self, admin_client, patient, settings):
        settings.MESSAGING_MAX_TEXT_LENGTH = 1000

        response = admin_client.post(
            SEND, {'patient': str(patient.id), 'text': 'ção ' * 1200}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'too long' in response.data['error']
        assert not MessageLog.objects.exists()

    def test_long_link_is_stored_whole(self, patient):
        message_log = services.send_message(patient=patient, body='ção ' * 1000)

        message_log.refresh_from_db()
        assert len(message_log.link) > 4000
        _, params = link_params(message_log.link)
        assert params['text'] == 'ção ' * 1000

    def test_requires_recipient_and_text(self, admin_client, patient):
        assert admin_client.post(SEND, {'text': 'Hello'}, format='json').status_code == 400
        assert admin_client.post(SEND, {'patient': str(patient.id)}, format='json').status_code == 400

    @pytest.mark.parametrize('client_fixture', ['doctor_client', 'patient_client', 'billing_client'])
    def test_only_admin_and_scheduling(self, request, client_fixture, patient):
        client = request.getfixturevalue(client_fixture)

        response = client.post(SEND, {'patient': str(patient.id), 'text': 'Hi'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestBulkReminders:
    """Test POST /api/v1/messaging/reminders/"""

    def test_reminders_staggered_and_skipped(
        self, scheduling_client, appointment_factory, other_patient, patient
    ):
        target = date(2024, 12, 20)
        first = appointment_factory(time=time(9, 0))
        second = appointment_factory(time=time(10, 0), patient=other_patient)
        appointment_factory(time=time(11, 0), status='confirmed')
        short_phone = appointment_factory(time=time(8, 0), patient=patient)
        patient.phone = '123'
        patient.save()

        response = scheduling_client.post(REMINDERS, {'date': target.isoformat()}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['date'] == '2024-12-20'
        # patient's phone is now unusable, so only other_patient gets a link
        sent_ids = [entry['appointment_id'] for entry in response.data['sent']]
        assert sent_ids == [str(second.id)]
        assert response.data['sent'][0]['open_delay_ms'] == 0
        skipped_ids = {entry['appointment_id'] for entry in response.data['skipped']}
        assert skipped_ids == {str(short_phone.id), str(first.id)}

    def test_delays_grow_by_configured_step(self, appointment_factory, other_patient, settings):
        settings.MESSAGING_BULK_DELAY_MS = 1500
        target = timezone.localdate() + timedelta(days=1)
        appointment_factory(date=target, time=time(9, 0))
        appointment_factory(date=target, time=time(10, 0), patient=other_patient)

        result = services.send_bulk_reminders()

        assert result['date'] == target
        assert [entry['open_delay_ms'] for entry in result['sent']] == [0, 1500]
        assert MessageLog.objects.filter(status='sent').count() == 2


@pytest.mark.django_db
class TestTestMessageAndHistory:

    def test_test_message_goes_to_clinic_number(self, admin_client):
        response = admin_client.post(TEST, {}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        _, params = link_params(response.data['link'])
        assert params['phone'] == '5598974003414'
        assert MessageLog.objects.get().status == 'test'

    def test_test_message_with_bad_clinic_number(self, admin_client):
        clinic = ClinicSettings.load()
        clinic.whatsapp_number = '123'
        clinic.save()

        response = admin_client.post(TEST, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_history_list_and_delete(self, scheduling_client, patient):
        services.send_message(patient=patient, body='Hello {patient_name}')
        log = services.send_message(patient=patient, body='Second')

        listing = scheduling_client.get(HISTORY)
        assert listing.status_code == status.HTTP_200_OK
        assert len(listing.data['results']) == 2

        response = scheduling_client.delete(f'{HISTORY}{log.id}/')
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert MessageLog.objects.count() == 1


@pytest.mark.django_db
class TestTemplates:

    def test_default_templates_are_seeded(self, scheduling_client):
        response = scheduling_client.get(TEMPLATES)

        names = {row['name'] for row in response.data['results']}
        assert names == {'Cancellation', 'Confirmation', 'General', 'Reminder', 'Reschedule'}

    def test_scheduling_cannot_edit_templates(self, scheduling_client):
        response = scheduling_client.post(TEMPLATES, {'name': 'New', 'body': 'Hi'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_creates_template(self, admin_client):
        response = admin_client.post(
            TEMPLATES, {'name': 'Exam results', 'body': 'Hi {patient_name}, your results are ready.'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
