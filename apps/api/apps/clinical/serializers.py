"""
Clinical serializers: patients, doctors, appointments, medical records.
"""
from django.utils import timezone
from rest_framework import serializers

from apps.authz.models import User, RoleChoices
from apps.authz.serializers_users import DEFAULT_SPECIALTY
from .models import (
    AbsenceJustification,
    AbsenceReasonChoices,
    Appointment,
    AppointmentStatusChoices,
    MedicalRecord,
)


def normalize_status(value):
    """
    Trim and lower-case an appointment status; reject unknown values.
    """
    cleaned = (value or '').strip().lower()
    if cleaned not in AppointmentStatusChoices.values:
        raise serializers.ValidationError(
            f"Invalid status '{value}'. Valid statuses: {', '.join(AppointmentStatusChoices.values)}"
        )
    return cleaned


def calculate_age(birth_date, today=None):
    """Whole years since birth_date; None when unknown."""
    if not birth_date:
        return None
    today = today or timezone.localdate()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


# ============================================================================
# Patients and doctors (accounts with a fixed role)
# ============================================================================

class _RoleAccountSerializer(serializers.ModelSerializer):
    """
    Account serializer for screens that manage one role.

    Subclasses set `account_role`; created accounts always get that role.
    Without a password the account cannot sign in until an admin resets it.
    """
    account_role = None
    password = serializers.CharField(write_only=True, required=False, min_length=8, max_length=64)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name cannot be empty.')
        return value

    def validate_email(self, value):
        return value.strip().lower()

    def create(self, validated_data):
        password = validated_data.pop('password', None)
        return User.objects.create_user(password=password, role=self.account_role, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=['password'])
        return instance


class PatientSerializer(_RoleAccountSerializer):
    """
    Patient row for the patients screen.

    Used for:
    - GET/POST /api/v1/clinical/patients/
    - GET/PATCH/DELETE /api/v1/clinical/patients/{id}/
    """
    account_role = RoleChoices.PATIENT
    age = serializers.SerializerMethodField()
    last_appointment_date = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'tax_id',
            'birth_date',
            'address',
            'avatar_url',
            'is_active',
            'age',
            'last_appointment_date',
            'password',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_age(self, obj):
        return calculate_age(obj.birth_date)

    def get_last_appointment_date(self, obj):
        # Annotated by PatientViewSet; computed for freshly created rows
        if hasattr(obj, 'last_appointment_date'):
            last = obj.last_appointment_date
        else:
            last = obj.patient_appointments.order_by('-date').values_list('date', flat=True).first()
        return last.isoformat() if last else None

    def validate_birth_date(self, value):
        if value and value > timezone.localdate():
            raise serializers.ValidationError('Birth date cannot be in the future.')
        return value


class DoctorSerializer(_RoleAccountSerializer):
    """
    Doctor row for the doctors screen.

    Used for:
    - GET/POST /api/v1/clinical/doctors/
    - GET/PATCH/DELETE /api/v1/clinical/doctors/{id}/
    """
    account_role = RoleChoices.CLINICIAN

    class Meta:
        model = User
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'license_number',
            'specialty',
            'avatar_url',
            'is_active',
            'password',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def create(self, validated_data):
        if not validated_data.get('specialty'):
            validated_data['specialty'] = DEFAULT_SPECIALTY
        return super().create(validated_data)


# ============================================================================
# Appointments
# ============================================================================

class AppointmentSerializer(serializers.ModelSerializer):
    """
    Read representation of an appointment.

    Used for:
    - GET /api/v1/clinical/appointments/ and detail
    - Responses of every appointment write
    """
    patient_name = serializers.CharField(source='patient.name', read_only=True)
    patient_phone = serializers.CharField(source='patient.phone', read_only=True)
    doctor_name = serializers.CharField(source='doctor.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    time = serializers.TimeField(format='%H:%M', read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id',
            'patient',
            'patient_name',
            'patient_phone',
            'doctor',
            'doctor_name',
            'date',
            'time',
            'status',
            'status_display',
            'appointment_type',
            'price',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AppointmentWriteSerializer(serializers.ModelSerializer):
    """
    Create/update payload for appointments.

    Persistence goes through apps.clinical.services so the slot check and
    the linked revenue record are handled in one place.
    """
    patient = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=RoleChoices.PATIENT)
    )
    doctor = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=RoleChoices.CLINICIAN)
    )
    status = serializers.CharField(required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)

    class Meta:
        model = Appointment
        fields = [
            'patient',
            'doctor',
            'date',
            'time',
            'status',
            'appointment_type',
            'price',
            'notes',
        ]
        extra_kwargs = {
            'appointment_type': {'required': False},
            'notes': {'required': False},
        }
        # Slot uniqueness is checked by apps.clinical.services (HTTP 409)
        validators = []

    def validate_status(self, value):
        return normalize_status(value)

    def validate_appointment_type(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Appointment type cannot be empty.')
        return value

    def validate_doctor(self, value):
        if not value.is_active:
            raise serializers.ValidationError('This doctor is inactive.')
        return value

    def validate_patient(self, value):
        if not value.is_active:
            raise serializers.ValidationError('This patient is inactive.')
        return value


class AppointmentTransitionSerializer(serializers.Serializer):
    status = serializers.CharField()
    reason = serializers.CharField(required=False, allow_blank=True)

    def validate_status(self, value):
        return normalize_status(value)


class ConfirmAllSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)


class SlotQuerySerializer(serializers.Serializer):
    doctor_id = serializers.UUIDField()
    date = serializers.DateField()
    time = serializers.TimeField(required=False)
    exclude_id = serializers.UUIDField(required=False)


class AbsenceJustificationSerializer(serializers.ModelSerializer):
    """
    Doctor's justification for a missed appointment.

    Used for:
    - POST /api/v1/clinical/appointments/{id}/justify-absence/
    """
    reason = serializers.ChoiceField(choices=AbsenceReasonChoices.choices)
    reason_display = serializers.CharField(source='get_reason_display', read_only=True)
    description = serializers.CharField(min_length=10)
    date = serializers.DateField(required=False)

    class Meta:
        model = AbsenceJustification
        fields = [
            'id',
            'appointment',
            'doctor',
            'reason',
            'reason_display',
            'description',
            'date',
            'created_at',
        ]
        read_only_fields = ['id', 'appointment', 'doctor', 'created_at']


# ============================================================================
# Medical records
# ============================================================================

class MedicalRecordSerializer(serializers.ModelSerializer):
    """
    Medical record.

    Used for:
    - /api/v1/clinical/medical-records/

    Clinicians always write as themselves; admins must name the doctor.
    """
    patient = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=RoleChoices.PATIENT)
    )
    doctor = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=RoleChoices.CLINICIAN),
        required=False
    )
    patient_name = serializers.CharField(source='patient.name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.name', read_only=True)

    class Meta:
        model = MedicalRecord
        fields = [
            'id',
            'patient',
            'patient_name',
            'doctor',
            'doctor_name',
            'date',
            'diagnosis',
            'treatment',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'notes': {'required': False},
        }

    def validate(self, attrs):
        user = self.context['request'].user
        if user.role == RoleChoices.CLINICIAN:
            attrs['doctor'] = user
        elif self.instance is None and not attrs.get('doctor'):
            raise serializers.ValidationError({'doctor': 'This field is required.'})
        return attrs
