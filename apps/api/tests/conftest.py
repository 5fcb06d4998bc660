"""
Global test fixtures for pytest.

Provides reusable fixtures for API testing:
- Authenticated API clients by role
- Model instances (patients, doctors, appointments, ledger entries)
- Factories for building more of them inside a test
"""
from datetime import date, time
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.authz.models import User, RoleChoices
from apps.clinical.models import Appointment, MedicalRecord
from apps.finance.models import FinancialRecord


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


# ============================================================================
# Users by role
# ============================================================================

@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@test.com',
        password='testpass123',
        name='Clinic Admin',
        role=RoleChoices.ADMIN,
        is_staff=True,
    )


@pytest.fixture
def billing_user(db):
    return User.objects.create_user(
        email='billing@test.com',
        password='testpass123',
        name='Billing Clerk',
        role=RoleChoices.BILLING,
    )


@pytest.fixture
def scheduling_user(db):
    return User.objects.create_user(
        email='scheduling@test.com',
        password='testpass123',
        name='Front Desk',
        role=RoleChoices.SCHEDULING,
    )


@pytest.fixture
def doctor(db):
    return User.objects.create_user(
        email='doctor@test.com',
        password='testpass123',
        name='Dr. Ana Souza',
        role=RoleChoices.CLINICIAN,
        license_number='CRM-12345',
        specialty='Neurology',
        phone='98999990000',
    )


@pytest.fixture
def other_doctor(db):
    return User.objects.create_user(
        email='doctor2@test.com',
        password='testpass123',
        name='Dr. Bruno Lima',
        role=RoleChoices.CLINICIAN,
        specialty='General',
    )


@pytest.fixture
def patient(db):
    return User.objects.create_user(
        email='patient@test.com',
        password='testpass123',
        name='Maria Silva',
        role=RoleChoices.PATIENT,
        phone='(98) 98888-7777',
        birth_date=date(1990, 5, 17),
    )


@pytest.fixture
def other_patient(db):
    return User.objects.create_user(
        email='patient2@test.com',
        password='testpass123',
        name='Joao Pereira',
        role=RoleChoices.PATIENT,
        phone='98977776666',
    )


# ============================================================================
# API Clients
# ============================================================================

@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


@pytest.fixture
def admin_client(admin_user):
    """Admin has full access to all resources."""
    return _client_for(admin_user)


@pytest.fixture
def billing_client(billing_user):
    """Billing works the ledger only."""
    return _client_for(billing_user)


@pytest.fixture
def scheduling_client(scheduling_user):
    """Scheduling runs appointments, patients and messaging."""
    return _client_for(scheduling_user)


@pytest.fixture
def doctor_client(doctor):
    """Clinician sees their own agenda and writes medical records."""
    return _client_for(doctor)


@pytest.fixture
def patient_client(patient):
    """Patient reads their own appointments, records and invoices."""
    return _client_for(patient)


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def appointment_factory(db, patient, doctor):
    """Create appointments without going through the booking service."""
    def create_appointment(**kwargs):
        defaults = {
            'patient': patient,
            'doctor': doctor,
            'date': date(2024, 12, 20),
            'time': time(9, 0),
            'status': 'scheduled',
            'appointment_type': 'consultation',
            'price': Decimal('300.00'),
        }
        defaults.update(kwargs)
        return Appointment.objects.create(**defaults)
    return create_appointment


@pytest.fixture
def appointment(appointment_factory):
    return appointment_factory()


@pytest.fixture
def financial_record_factory(db):
    def create_record(**kwargs):
        defaults = {
            'kind': 'revenue',
            'amount': Decimal('100.00'),
            'description': 'Consultation - consultation',
            'category': 'Consultation',
            'date': date(2024, 12, 20),
            'status': 'pending',
        }
        defaults.update(kwargs)
        return FinancialRecord.objects.create(**defaults)
    return create_record


@pytest.fixture
def medical_record_factory(db, patient, doctor):
    def create_record(**kwargs):
        defaults = {
            'patient': patient,
            'doctor': doctor,
            'date': date(2024, 12, 20),
            'diagnosis': 'Tension headache',
            'treatment': 'Analgesics and rest',
        }
        defaults.update(kwargs)
        return MedicalRecord.objects.create(**defaults)
    return create_record
