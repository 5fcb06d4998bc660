"""
Clinical views: patients, doctors, appointments (scheduling grid) and
medical records.
"""
from django.db import transaction
from django.db.models import Max, ProtectedError, Q
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.authz.models import User, RoleChoices
from apps.core.models import ClinicSettings
from apps.core.observability.events import log_account_event, log_domain_event
from apps.core.params import parse_bool_param, parse_date_param, parse_uuid_param
from . import services
from .models import Appointment, MedicalRecord
from .permissions import (
    AppointmentPermission,
    DoctorPermission,
    MedicalRecordPermission,
    PatientPermission,
)
from .serializers import (
    AbsenceJustificationSerializer,
    AppointmentSerializer,
    AppointmentTransitionSerializer,
    AppointmentWriteSerializer,
    ConfirmAllSerializer,
    DoctorSerializer,
    MedicalRecordSerializer,
    PatientSerializer,
    SlotQuerySerializer,
)


def slot_conflict_response(exc):
    """409 body for a rejected appointment write."""
    blocking = exc.blocking
    return Response(
        {
            'error': str(exc),
            'conflict': {
                'appointment_id': str(blocking.id),
                'patient_name': blocking.patient.name,
                'doctor_name': blocking.doctor.name,
                'date': blocking.date.isoformat(),
                'time': blocking.time.strftime('%H:%M'),
            },
        },
        status=status.HTTP_409_CONFLICT
    )


class _RoleAccountViewSet(viewsets.ModelViewSet):
    """
    CRUD over accounts of a single role.

    Query parameters:
    - ?q=search_term - Search by name, email, phone
    - ?include_inactive=true - Include disabled accounts (default: false)

    Deleting an account that appointments or medical records reference
    answers 409; deactivate it instead.
    """
    account_role = None
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_base_queryset(self):
        return User.objects.filter(role=self.account_role)

    def get_queryset(self):
        queryset = self.get_base_queryset()

        if not parse_bool_param(self.request.query_params, 'include_inactive'):
            # Detail routes still reach inactive rows so they can be re-enabled
            if self.action == 'list':
                queryset = queryset.filter(is_active=True)

        q = self.request.query_params.get('q')
        if q:
            queryset = queryset.filter(
                Q(name__icontains=q) |
                Q(email__icontains=q) |
                Q(phone__icontains=q)
            )

        return queryset.order_by('name')

    def perform_create(self, serializer):
        account = serializer.save()
        log_account_event(f'{self.account_role}_created', account, actor=self.request.user)

    def perform_update(self, serializer):
        account = serializer.save()
        log_account_event(
            f'{self.account_role}_updated', account, actor=self.request.user,
            fields=sorted(serializer.validated_data)
        )

    def destroy(self, request, *args, **kwargs):
        account = self.get_object()
        account_id = str(account.id)
        try:
            with transaction.atomic():
                account.delete()
        except ProtectedError:
            log_account_event(f'{self.account_role}_deleted', account, actor=request.user, result='blocked')
            return Response(
                {'error': 'This account still has appointments or medical records. Deactivate it instead.'},
                status=status.HTTP_409_CONFLICT
            )
        log_domain_event(
            f'{self.account_role}_deleted',
            entity_type='User',
            entity_id=account_id,
            entity_ids={'actor_user_id': str(request.user.id)},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class PatientViewSet(_RoleAccountViewSet):
    """
    ViewSet for the patients screen (accounts with role=patient).

    Endpoints:
    - GET /api/v1/clinical/patients/
    - POST /api/v1/clinical/patients/
    - GET/PATCH/DELETE /api/v1/clinical/patients/{id}/

    Each row carries age and last_appointment_date.

    RBAC:
    - Admin: Full CRUD
    - Scheduling: Read, create, update
    - Clinician: Read-only
    """
    account_role = RoleChoices.PATIENT
    serializer_class = PatientSerializer
    permission_classes = [PatientPermission]

    def get_base_queryset(self):
        return super().get_base_queryset().annotate(
            last_appointment_date=Max('patient_appointments__date')
        )


class DoctorViewSet(_RoleAccountViewSet):
    """
    ViewSet for the doctors screen (accounts with role=clinician).

    Endpoints:
    - GET /api/v1/clinical/doctors/
    - POST /api/v1/clinical/doctors/
    - GET/PATCH/DELETE /api/v1/clinical/doctors/{id}/

    Query parameters:
    - ?specialty=... - Filter by specialty

    RBAC:
    - Admin: Full CRUD
    - Scheduling, Clinician, Billing: Read-only
    """
    account_role = RoleChoices.CLINICIAN
    serializer_class = DoctorSerializer
    permission_classes = [DoctorPermission]

    def get_queryset(self):
        queryset = super().get_queryset()
        specialty = self.request.query_params.get('specialty')
        if specialty:
            queryset = queryset.filter(specialty__iexact=specialty)
        return queryset


class AppointmentViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Appointment endpoints (scheduling grid).

    Endpoints:
    - GET /api/v1/clinical/appointments/
    - POST /api/v1/clinical/appointments/ (also books pending revenue)
    - GET /api/v1/clinical/appointments/{id}/
    - PATCH /api/v1/clinical/appointments/{id}/
    - DELETE /api/v1/clinical/appointments/{id}/ (also removes linked revenue)
    - POST /api/v1/clinical/appointments/{id}/transition/
    - POST /api/v1/clinical/appointments/{id}/justify-absence/
    - POST /api/v1/clinical/appointments/confirm-all/
    - GET /api/v1/clinical/appointments/slot-availability/

    Query parameters:
    - status, date, date_from, date_to, doctor_id, patient_id

    Any write that would put a second live appointment in a
    (doctor, date, time) slot answers 409.
    """
    permission_classes = [AppointmentPermission]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = Appointment.objects.select_related('patient', 'doctor')

        user = self.request.user
        if user.role == RoleChoices.CLINICIAN:
            queryset = queryset.filter(doctor=user)
        elif user.role == RoleChoices.PATIENT:
            queryset = queryset.filter(patient=user)

        params = self.request.query_params

        status_filter = params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter.strip().lower())

        for param, lookup in (('date', 'date'), ('date_from', 'date__gte'), ('date_to', 'date__lte')):
            value = parse_date_param(params, param)
            if value:
                queryset = queryset.filter(**{lookup: value})

        for param in ('doctor_id', 'patient_id'):
            value = parse_uuid_param(params, param)
            if value:
                queryset = queryset.filter(**{param: value})

        return queryset.order_by('date', 'time')

    def get_serializer_class(self):
        if self.action in ['create', 'partial_update']:
            return AppointmentWriteSerializer
        return AppointmentSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            appointment = services.create_appointment(**serializer.validated_data)
        except services.SlotConflictError as exc:
            return slot_conflict_response(exc)

        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        appointment = self.get_object()
        serializer = self.get_serializer(appointment, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            appointment = services.update_appointment(appointment, **serializer.validated_data)
        except services.SlotConflictError as exc:
            return slot_conflict_response(exc)

        return Response(AppointmentSerializer(appointment).data)

    def destroy(self, request, *args, **kwargs):
        appointment = self.get_object()
        removed = services.delete_appointment(appointment)
        return Response(
            {'deleted': True, 'financial_records_removed': removed},
            status=status.HTTP_200_OK
        )

    @action(detail=True, methods=['post'])
    def transition(self, request, pk=None):
        """
        Set any status.

        Request body:
        {
            "status": "completed",
            "reason": "optional note appended to the appointment"
        }
        """
        appointment = self.get_object()
        serializer = AppointmentTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            with transaction.atomic():
                appointment = Appointment.objects.select_for_update().select_related(
                    'patient', 'doctor'
                ).get(pk=appointment.pk)
                appointment = services.transition_appointment(
                    appointment,
                    serializer.validated_data['status'],
                    reason=serializer.validated_data.get('reason'),
                )
        except services.SlotConflictError as exc:
            return slot_conflict_response(exc)

        return Response(AppointmentSerializer(appointment).data)

    @action(detail=False, methods=['post'], url_path='confirm-all')
    def confirm_all(self, request):
        """Confirm every scheduled appointment (optionally for one date)."""
        serializer = ConfirmAllSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        count = services.confirm_all(date=serializer.validated_data.get('date'))
        return Response({'confirmed': count})

    @action(detail=True, methods=['post'], url_path='justify-absence')
    def justify_absence(self, request, pk=None):
        """
        Doctor justifies missing an appointment; the appointment is canceled.

        Request body:
        {
            "reason": "illness",
            "description": "at least ten characters"
        }
        """
        appointment = self.get_object()
        serializer = AbsenceJustificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        justification = services.justify_absence(
            appointment,
            doctor=appointment.doctor,
            reason=serializer.validated_data['reason'],
            description=serializer.validated_data['description'],
            date=serializer.validated_data.get('date'),
        )
        appointment.refresh_from_db()

        return Response(
            {
                'justification': AbsenceJustificationSerializer(justification).data,
                'appointment': AppointmentSerializer(appointment).data,
            },
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['get'], url_path='slot-availability')
    def slot_availability(self, request):
        """
        Check a slot, or list the free slots of a day.

        - With time: {"available": bool, "conflict": {...} | null}
        - Without time: {"free_slots": ["08:00", "08:30", ...]} within the
          clinic's working hours
        """
        query = SlotQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        if data.get('time') is None:
            clinic = ClinicSettings.load()
            slots = services.free_slots(
                data['doctor_id'], data['date'],
                clinic.working_hours_start, clinic.working_hours_end
            )
            return Response({
                'doctor_id': str(data['doctor_id']),
                'date': data['date'].isoformat(),
                'free_slots': [slot.strftime('%H:%M') for slot in slots],
            })

        blocking = services.find_slot_conflict(
            data['doctor_id'], data['date'], data['time'],
            exclude_id=data.get('exclude_id')
        )
        conflict = None
        if blocking is not None:
            conflict = {
                'appointment_id': str(blocking.id),
                'patient_name': blocking.patient.name,
                'doctor_name': blocking.doctor.name,
                'status': blocking.status,
            }
        return Response({'available': blocking is None, 'conflict': conflict})


class MedicalRecordViewSet(viewsets.ModelViewSet):
    """
    ViewSet for medical records.

    Endpoints:
    - GET/POST /api/v1/clinical/medical-records/
    - GET/PATCH/DELETE /api/v1/clinical/medical-records/{id}/

    Query parameters:
    - ?patient_id=<uuid>, ?doctor_id=<uuid>

    RBAC:
    - Admin: Full CRUD
    - Clinician: Read all, write own
    - Patient: Read own
    """
    serializer_class = MedicalRecordSerializer
    permission_classes = [MedicalRecordPermission]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = MedicalRecord.objects.select_related('patient', 'doctor')

        if self.request.user.role == RoleChoices.PATIENT:
            queryset = queryset.filter(patient=self.request.user)

        params = self.request.query_params
        for param in ('patient_id', 'doctor_id'):
            value = parse_uuid_param(params, param)
            if value:
                queryset = queryset.filter(**{param: value})

        return queryset.order_by('-date', '-created_at')

    def perform_create(self, serializer):
        record = serializer.save()
        log_domain_event(
            'medical_record_created',
            entity_type='MedicalRecord',
            entity_id=str(record.id),
            entity_ids={'patient_id': str(record.patient_id), 'doctor_id': str(record.doctor_id)},
        )

    def perform_update(self, serializer):
        record = serializer.save()
        log_domain_event(
            'medical_record_updated',
            entity_type='MedicalRecord',
            entity_id=str(record.id),
            fields=sorted(serializer.validated_data),
        )

    def perform_destroy(self, instance):
        record_id = str(instance.id)
        instance.delete()
        log_domain_event('medical_record_deleted', entity_type='MedicalRecord', entity_id=record_id)
