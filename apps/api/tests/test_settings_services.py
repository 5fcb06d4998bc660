"""
Tests for clinic settings and the service catalog.
"""
import pytest
from rest_framework import status

from apps.core.models import ClinicSettings, Service


SETTINGS = '/api/v1/settings/'
SERVICES = '/api/v1/services/'


@pytest.mark.django_db
class TestClinicSettings:
    """Test GET/PATCH /api/v1/settings/"""

    @pytest.mark.parametrize('client_fixture', ['billing_client', 'doctor_client', 'patient_client'])
    def test_any_account_reads(self, request, client_fixture):
        client = request.getfixturevalue(client_fixture)

        response = client.get(SETTINGS)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['company_name'] == 'Neuro Integrar'
        assert response.data['whatsapp_number'] == '98974003414'
        assert response.data['working_hours_start'] == '08:00'
        assert response.data['working_hours_end'] == '21:00'

    def test_single_row(self, admin_client):
        admin_client.get(SETTINGS)
        admin_client.patch(SETTINGS, {'company_phone': '9832210000'}, format='json')

        assert ClinicSettings.objects.count() == 1

    def test_admin_updates(self, admin_client):
        response = admin_client.patch(
            SETTINGS,
            {'company_name': 'Clinica Centro', 'working_hours_start': '07:30'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['company_name'] == 'Clinica Centro'
        assert response.data['working_hours_start'] == '07:30'
        assert ClinicSettings.load().company_name == 'Clinica Centro'

    def test_hours_must_end_after_start(self, admin_client):
        response = admin_client.patch(SETTINGS, {'working_hours_start': '22:00'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'working_hours_end' in response.data

    def test_blank_company_name_rejected(self, admin_client):
        response = admin_client.patch(SETTINGS, {'company_name': '   '}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize('client_fixture', ['scheduling_client', 'billing_client', 'doctor_client'])
    def test_non_admin_cannot_update(self, request, client_fixture):
        client = request.getfixturevalue(client_fixture)

        response = client.patch(SETTINGS, {'company_name': 'Hijacked'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert ClinicSettings.load().company_name == 'Neuro Integrar'


@pytest.mark.django_db
class TestServices:
    """Test /api/v1/services/"""

    def test_default_catalog(self, scheduling_client):
        response = scheduling_client.get(SERVICES)

        assert response.status_code == status.HTTP_200_OK
        rows = {row['name']: row for row in response.data['results']}
        assert len(rows) == 4
        assert rows['Neurological Consultation']['price'] == '300.00'
        assert rows['Neurological Consultation']['duration_minutes'] == 60

    def test_inactive_services_hidden_by_default(self, admin_client):
        Service.objects.filter(name='Electroencephalogram').update(is_active=False)

        response = admin_client.get(SERVICES)
        assert 'Electroencephalogram' not in [row['name'] for row in response.data['results']]

        response = admin_client.get(SERVICES, {'include_inactive': 'true'})
        assert len(response.data['results']) == 4

    def test_admin_creates_service(self, admin_client):
        response = admin_client.post(
            SERVICES, {'name': 'Speech Therapy', 'price': '180.00', 'duration_minutes': 45}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Service.objects.get(name='Speech Therapy').is_active is True

    def test_negative_price_rejected(self, admin_client):
        response = admin_client.post(
            SERVICES, {'name': 'Broken', 'price': '-1.00', 'duration_minutes': 30}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'price' in response.data

    def test_duplicate_name_rejected(self, admin_client):
        response = admin_client.post(
            SERVICES, {'name': 'Cognitive Therapy', 'price': '10.00'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_admin_cannot_write(self, scheduling_client):
        service = Service.objects.get(name='Cognitive Therapy')

        response = scheduling_client.patch(f'{SERVICES}{service.id}/', {'price': '1.00'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_deletes_service(self, admin_client):
        service = Service.objects.get(name='Cognitive Therapy')

        response = admin_client.delete(f'{SERVICES}{service.id}/')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Service.objects.filter(id=service.id).exists()
