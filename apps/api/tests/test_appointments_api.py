"""
Integration tests for Appointment API endpoints.

Tests booking (with its revenue entry), the 409 slot rule, role
scoping, status transitions and slot availability.
"""
from datetime import date, time
from decimal import Decimal

import pytest
from rest_framework import status

from apps.clinical.models import Appointment, AbsenceJustification
from apps.finance.models import FinancialRecord


ENDPOINT = '/api/v1/clinical/appointments/'


def booking_payload(patient, doctor, **overrides):
    payload = {
        'patient': str(patient.id),
        'doctor': str(doctor.id),
        'date': '2024-12-20',
        'time': '09:00',
        'appointment_type': 'consultation',
        'price': '300.00',
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
class TestAppointmentCreate:
    """Test POST /api/v1/clinical/appointments/"""

    def test_create_books_appointment_and_pending_revenue(self, scheduling_client, patient, doctor):
        response = scheduling_client.post(ENDPOINT, booking_payload(patient, doctor), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'scheduled'
        assert response.data['time'] == '09:00'
        assert response.data['patient_name'] == patient.name
        assert response.data['doctor_name'] == doctor.name

        record = FinancialRecord.objects.get(appointment_id=response.data['id'])
        assert record.amount == Decimal('300.00')
        assert record.status == 'pending'

    def test_double_booking_returns_409(self, scheduling_client, patient, other_patient, doctor):
        scheduling_client.post(ENDPOINT, booking_payload(patient, doctor), format='json')

        response = scheduling_client.post(
            ENDPOINT, booking_payload(other_patient, doctor), format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert patient.name in response.data['error']
        assert doctor.name in response.data['error']
        assert response.data['conflict']['patient_name'] == patient.name
        assert Appointment.objects.count() == 1
        assert FinancialRecord.objects.count() == 1

    def test_canceled_holder_does_not_block(self, admin_client, appointment_factory, other_patient, doctor):
        appointment_factory(status='canceled')

        response = admin_client.post(ENDPOINT, booking_payload(other_patient, doctor), format='json')

        assert response.status_code == status.HTTP_201_CREATED

    def test_status_is_normalized(self, admin_client, patient, doctor):
        response = admin_client.post(
            ENDPOINT, booking_payload(patient, doctor, status='  Confirmed '), format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'confirmed'

    def test_unknown_status_is_rejected(self, admin_client, patient, doctor):
        response = admin_client.post(
            ENDPOINT, booking_payload(patient, doctor, status='agendado'), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'status' in response.data

    def test_negative_price_is_rejected(self, admin_client, patient, doctor):
        response = admin_client.post(
            ENDPOINT, booking_payload(patient, doctor, price='-10.00'), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_inactive_doctor_is_rejected(self, admin_client, patient, doctor):
        doctor.is_active = False
        doctor.save()

        response = admin_client.post(ENDPOINT, booking_payload(patient, doctor), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'doctor' in response.data

    def test_doctor_must_be_a_clinician(self, admin_client, patient, other_patient):
        response = admin_client.post(ENDPOINT, booking_payload(patient, other_patient), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'doctor' in response.data

    @pytest.mark.parametrize('client_fixture', ['doctor_client', 'patient_client', 'billing_client'])
    def test_only_front_desk_books(self, request, client_fixture, patient, doctor):
        client = request.getfixturevalue(client_fixture)

        response = client.post(ENDPOINT, booking_payload(patient, doctor), format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAppointmentList:
    """Test GET /api/v1/clinical/appointments/ - filters and scoping."""

    def test_filter_by_status(self, admin_client, appointment_factory):
        appointment_factory()
        confirmed = appointment_factory(time=time(10, 0), status='confirmed')

        response = admin_client.get(ENDPOINT, {'status': 'confirmed'})

        assert response.status_code == status.HTTP_200_OK
        ids = [row['id'] for row in response.data['results']]
        assert ids == [str(confirmed.id)]

    def test_filter_by_date_range(self, admin_client, appointment_factory):
        appointment_factory()
        later = appointment_factory(date=date(2025, 1, 10))

        response = admin_client.get(ENDPOINT, {'date_from': '2025-01-01', 'date_to': '2025-01-31'})

        ids = [row['id'] for row in response.data['results']]
        assert ids == [str(later.id)]

    def test_invalid_date_filter_returns_400(self, admin_client):
        response = admin_client.get(ENDPOINT, {'date': '20/12/2024'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_clinician_sees_own_agenda_only(self, doctor_client, appointment_factory, other_doctor):
        own = appointment_factory()
        appointment_factory(doctor=other_doctor)

        response = doctor_client.get(ENDPOINT)

        ids = [row['id'] for row in response.data['results']]
        assert ids == [str(own.id)]

    def test_patient_sees_own_appointments_only(self, patient_client, appointment_factory, other_patient):
        own = appointment_factory()
        appointment_factory(patient=other_patient, time=time(10, 0))

        response = patient_client.get(ENDPOINT)

        ids = [row['id'] for row in response.data['results']]
        assert ids == [str(own.id)]

    def test_billing_has_no_access(self, billing_client, appointment):
        response = billing_client.get(ENDPOINT)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unauthenticated_is_rejected(self, api_client):
        response = api_client.get(ENDPOINT)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestAppointmentUpdateDelete:
    """Test PATCH / DELETE /api/v1/clinical/appointments/{id}/"""

    def test_move_onto_occupied_slot_returns_409(self, admin_client, appointment_factory, other_patient):
        appointment_factory()
        mover = appointment_factory(patient=other_patient, time=time(10, 0))

        response = admin_client.patch(f'{ENDPOINT}{mover.id}/', {'time': '09:00'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        mover.refresh_from_db()
        assert mover.time == time(10, 0)

    def test_price_change_leaves_revenue_amount(self, admin_client, patient, doctor):
        created = admin_client.post(ENDPOINT, booking_payload(patient, doctor), format='json')

        response = admin_client.patch(
            f"{ENDPOINT}{created.data['id']}/", {'price': '500.00'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['price'] == '500.00'
        record = FinancialRecord.objects.get(appointment_id=created.data['id'])
        assert record.amount == Decimal('300.00')

    def test_delete_removes_appointment_and_revenue(self, admin_client, patient, doctor):
        created = admin_client.post(ENDPOINT, booking_payload(patient, doctor), format='json')

        response = admin_client.delete(f"{ENDPOINT}{created.data['id']}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['financial_records_removed'] == 1
        assert not Appointment.objects.exists()
        assert not FinancialRecord.objects.exists()

    def test_clinician_cannot_edit_fields(self, doctor_client, appointment):
        response = doctor_client.patch(f'{ENDPOINT}{appointment.id}/', {'notes': 'x'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAppointmentActions:
    """transition, confirm-all, justify-absence, slot-availability."""

    def test_clinician_completes_own_appointment(self, doctor_client, appointment):
        response = doctor_client.post(
            f'{ENDPOINT}{appointment.id}/transition/', {'status': 'completed'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'completed'

    def test_clinician_cannot_touch_other_agenda(self, doctor_client, appointment_factory, other_doctor):
        foreign = appointment_factory(doctor=other_doctor)

        response = doctor_client.post(
            f'{ENDPOINT}{foreign.id}/transition/', {'status': 'completed'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reactivation_into_taken_slot_returns_409(self, admin_client, appointment_factory, other_patient):
        canceled = appointment_factory(status='canceled')
        appointment_factory(patient=other_patient)

        response = admin_client.post(
            f'{ENDPOINT}{canceled.id}/transition/', {'status': 'confirmed'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_confirm_all(self, scheduling_client, appointment_factory):
        appointment_factory()
        appointment_factory(time=time(10, 0))
        appointment_factory(time=time(11, 0), status='completed')

        response = scheduling_client.post(f'{ENDPOINT}confirm-all/', {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['confirmed'] == 2
        assert Appointment.objects.filter(status='confirmed').count() == 2

    def test_justify_absence(self, doctor_client, appointment):
        response = doctor_client.post(
            f'{ENDPOINT}{appointment.id}/justify-absence/',
            {'reason': 'illness', 'description': 'Fever since yesterday night'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['appointment']['status'] == 'canceled'
        assert 'Absence justified: Illness - Fever since yesterday night' in response.data['appointment']['notes']
        assert AbsenceJustification.objects.filter(appointment=appointment).count() == 1

    def test_justify_absence_requires_description(self, doctor_client, appointment):
        response = doctor_client.post(
            f'{ENDPOINT}{appointment.id}/justify-absence/',
            {'reason': 'illness', 'description': 'sick'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        appointment.refresh_from_db()
        assert appointment.status == 'scheduled'

    def test_scheduling_cannot_justify_absence(self, scheduling_client, appointment):
        response = scheduling_client.post(
            f'{ENDPOINT}{appointment.id}/justify-absence/',
            {'reason': 'illness', 'description': 'Fever since yesterday night'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_slot_availability_for_taken_time(self, scheduling_client, appointment, doctor):
        response = scheduling_client.get(
            f'{ENDPOINT}slot-availability/',
            {'doctor_id': str(doctor.id), 'date': '2024-12-20', 'time': '09:00'}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['available'] is False
        assert response.data['conflict']['appointment_id'] == str(appointment.id)

    def test_slot_availability_excluding_self(self, scheduling_client, appointment, doctor):
        response = scheduling_client.get(
            f'{ENDPOINT}slot-availability/',
            {
                'doctor_id': str(doctor.id),
                'date': '2024-12-20',
                'time': '09:00',
                'exclude_id': str(appointment.id),
            }
        )

        assert response.data['available'] is True
        assert response.data['conflict'] is None

    def test_free_slots_within_working_hours(self, scheduling_client, appointment, doctor):
        response = scheduling_client.get(
            f'{ENDPOINT}slot-availability/',
            {'doctor_id': str(doctor.id), 'date': '2024-12-20'}
        )

        assert response.status_code == status.HTTP_200_OK
        slots = response.data['free_slots']
        assert slots[0] == '08:00'
        assert slots[-1] == '21:00'
        assert '09:00' not in slots
        assert '09:30' in slots
