"""
Role-scoped wholesale state.

A client that loads everything once and patches its copy after each
write starts from this snapshot. Every collection is limited to the
rows the caller's role may read through the regular endpoints.
"""
from apps.authz.models import User, RoleChoices
from apps.authz.serializers import AccountSummarySerializer
from apps.clinical.models import Appointment, MedicalRecord
from apps.clinical.serializers import AppointmentSerializer, MedicalRecordSerializer
from apps.finance.models import FinancialRecord
from apps.finance.serializers import FinancialRecordSerializer
from .models import Service
from .serializers import ServiceSerializer


def visible_accounts(user):
    role = user.role
    if role == RoleChoices.ADMIN:
        return User.objects.all()
    if role in (RoleChoices.SCHEDULING, RoleChoices.CLINICIAN):
        return User.objects.filter(role__in=[RoleChoices.PATIENT, RoleChoices.CLINICIAN])
    if role == RoleChoices.BILLING:
        return User.objects.filter(role=RoleChoices.CLINICIAN)
    return User.objects.filter(pk=user.pk)


def visible_appointments(user):
    qs = Appointment.objects.select_related('patient', 'doctor')
    role = user.role
    if role in (RoleChoices.ADMIN, RoleChoices.SCHEDULING):
        return qs
    if role == RoleChoices.CLINICIAN:
        return qs.filter(doctor=user)
    if role == RoleChoices.PATIENT:
        return qs.filter(patient=user)
    return qs.none()


def visible_financial_records(user):
    qs = FinancialRecord.objects.all()
    role = user.role
    if role in (RoleChoices.ADMIN, RoleChoices.BILLING):
        return qs
    if role == RoleChoices.PATIENT:
        return qs.filter(appointment__patient=user)
    return qs.none()


def visible_medical_records(user):
    qs = MedicalRecord.objects.select_related('patient', 'doctor')
    role = user.role
    if role in (RoleChoices.ADMIN, RoleChoices.CLINICIAN):
        return qs
    if role == RoleChoices.PATIENT:
        return qs.filter(patient=user)
    return qs.none()


def build_snapshot(user):
    return {
        'accounts': AccountSummarySerializer(visible_accounts(user).order_by('name'), many=True).data,
        'appointments': AppointmentSerializer(
            visible_appointments(user).order_by('date', 'time'), many=True
        ).data,
        'financial_records': FinancialRecordSerializer(
            visible_financial_records(user).order_by('-date', '-created_at'), many=True
        ).data,
        'medical_records': MedicalRecordSerializer(
            visible_medical_records(user).order_by('-date', '-created_at'), many=True
        ).data,
        'services': ServiceSerializer(Service.objects.filter(is_active=True), many=True).data,
    }
