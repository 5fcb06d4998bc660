"""
Clinical permissions for patients, doctors, appointments and medical records.

Row scoping (clinicians see their own agenda, patients their own data)
is applied in the viewsets' get_queryset; these classes decide which
roles may call which methods.
"""
from rest_framework import permissions
from apps.authz.models import RoleChoices
from apps.authz.permissions import RolePermission, user_role


class PatientPermission(permissions.BasePermission):
    """
    Permission for the patients screen.

    - Admin: Full CRUD
    - Scheduling: Read, create, update
    - Clinician: Read-only
    - Billing, Patient: No access
    """

    def has_permission(self, request, view):
        role = user_role(request)
        if role is None:
            return False

        if request.method in permissions.SAFE_METHODS:
            return role in {RoleChoices.ADMIN, RoleChoices.SCHEDULING, RoleChoices.CLINICIAN}

        if request.method == 'DELETE':
            return role == RoleChoices.ADMIN

        return role in {RoleChoices.ADMIN, RoleChoices.SCHEDULING}


class DoctorPermission(RolePermission):
    """
    Permission for the doctors screen.

    - Admin: Full CRUD
    - Scheduling, Clinician, Billing: Read-only
    - Patient: No access
    """
    read_roles = frozenset({RoleChoices.SCHEDULING, RoleChoices.CLINICIAN, RoleChoices.BILLING})
    write_roles = frozenset({RoleChoices.ADMIN})


class AppointmentPermission(permissions.BasePermission):
    """
    Permission for Appointment endpoints based on role.

    - Admin, Scheduling: Full access
    - Clinician: Read own agenda, change status of own appointments,
      justify absence on own appointments
    - Patient: Read own appointments
    - Billing: No access
    """
    STAFF_ROLES = {RoleChoices.ADMIN, RoleChoices.SCHEDULING}
    CLINICIAN_ACTIONS = {'transition', 'justify_absence'}

    def has_permission(self, request, view):
        role = user_role(request)
        if role is None:
            return False

        if view.action == 'justify_absence':
            return role in {RoleChoices.ADMIN, RoleChoices.CLINICIAN}

        if view.action == 'slot_availability':
            return role in self.STAFF_ROLES | {RoleChoices.CLINICIAN}

        if request.method in permissions.SAFE_METHODS:
            return role in self.STAFF_ROLES | {RoleChoices.CLINICIAN, RoleChoices.PATIENT}

        if view.action in self.CLINICIAN_ACTIONS:
            return role in self.STAFF_ROLES | {RoleChoices.CLINICIAN}

        return role in self.STAFF_ROLES

    def has_object_permission(self, request, view, obj):
        role = user_role(request)
        if role == RoleChoices.CLINICIAN:
            return obj.doctor_id == request.user.id
        if role == RoleChoices.PATIENT:
            return obj.patient_id == request.user.id
        return True


class MedicalRecordPermission(permissions.BasePermission):
    """
    Permission for medical records.

    - Admin: Full CRUD
    - Clinician: Read all (patient history), write records where they
      are the doctor
    - Patient: Read own records
    - Scheduling, Billing: No access
    """

    def has_permission(self, request, view):
        role = user_role(request)
        if role is None:
            return False

        if request.method in permissions.SAFE_METHODS:
            return role in {RoleChoices.ADMIN, RoleChoices.CLINICIAN, RoleChoices.PATIENT}

        return role in {RoleChoices.ADMIN, RoleChoices.CLINICIAN}

    def has_object_permission(self, request, view, obj):
        role = user_role(request)
        if role == RoleChoices.CLINICIAN and request.method not in permissions.SAFE_METHODS:
            return obj.doctor_id == request.user.id
        if role == RoleChoices.PATIENT:
            return obj.patient_id == request.user.id
        return True
