"""
Role dashboards.

Each role sees a fixed set of counters computed from the database for
"today" (local date) and the current month.
"""
from django.utils import timezone

from apps.authz.models import User, RoleChoices
from apps.clinical.models import Appointment, AppointmentStatusChoices
from apps.finance.models import FinancialRecord, FinancialStatusChoices
from apps.finance.services import monthly_summary


def _admin_metrics(user, today):
    summary = monthly_summary(today.year, today.month)
    return {
        'total_doctors': User.objects.filter(role=RoleChoices.CLINICIAN, is_active=True).count(),
        'total_patients': User.objects.filter(role=RoleChoices.PATIENT, is_active=True).count(),
        'appointments_today': Appointment.objects.filter(date=today).count(),
        'monthly_revenue': summary['revenue'],
    }


def _billing_metrics(user, today):
    summary = monthly_summary(today.year, today.month)
    return {
        'monthly_revenue': summary['revenue'],
        'monthly_expenses': summary['expenses'],
        'net_profit': summary['net_profit'],
        'pending_records': FinancialRecord.objects.filter(status=FinancialStatusChoices.PENDING).count(),
    }


def _scheduling_metrics(user, today):
    todays = Appointment.objects.filter(date=today)
    return {
        'appointments_today': todays.count(),
        'confirmed_today': todays.filter(status=AppointmentStatusChoices.CONFIRMED).count(),
        'awaiting_confirmation': todays.filter(status=AppointmentStatusChoices.SCHEDULED).count(),
        'patients_with_phone': User.objects.filter(
            role=RoleChoices.PATIENT, is_active=True
        ).exclude(phone='').count(),
    }


def _clinician_metrics(user, today):
    own = Appointment.objects.filter(doctor=user)
    return {
        'patients_seen': own.order_by().values('patient_id').distinct().count(),
        'appointments_today': own.filter(date=today).count(),
        'upcoming': own.filter(date__gte=today).exclude(
            status=AppointmentStatusChoices.CANCELED
        ).count(),
        'completed': own.filter(status=AppointmentStatusChoices.COMPLETED).count(),
    }


def _patient_metrics(user, today):
    own = Appointment.objects.filter(patient=user)
    return {
        'upcoming': own.filter(date__gte=today).exclude(
            status=AppointmentStatusChoices.CANCELED
        ).count(),
        'completed': own.filter(status=AppointmentStatusChoices.COMPLETED).count(),
    }


ROLE_DASHBOARDS = {
    RoleChoices.ADMIN: _admin_metrics,
    RoleChoices.BILLING: _billing_metrics,
    RoleChoices.SCHEDULING: _scheduling_metrics,
    RoleChoices.CLINICIAN: _clinician_metrics,
    RoleChoices.PATIENT: _patient_metrics,
}


def dashboard_metrics(user, today=None):
    """Counters for user's role, keyed by metric name."""
    today = today or timezone.localdate()
    builder = ROLE_DASHBOARDS.get(user.role)
    if builder is None:
        return {}
    return builder(user, today)
