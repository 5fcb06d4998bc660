"""
Authz serializers for sign-in and the signed-in account.
"""
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from apps.authz.models import User, RoleChoices


class AccountSummarySerializer(serializers.ModelSerializer):
    """
    Identity and profile of an account as the client session holds it.

    Used for:
    - Token response (POST /api/v1/auth/token/)
    - Current session (GET /api/v1/auth/me/)
    - Self-service profile (GET /api/v1/users/me/)
    """
    role_display = serializers.CharField(source='get_role_display', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'role',
            'role_display',
            'phone',
            'avatar_url',
            'tax_id',
            'birth_date',
            'address',
            'license_number',
            'specialty',
            'is_active',
            'last_login',
            'created_at',
        ]
        read_only_fields = fields


class ClinicTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Email + password sign-in.

    Unknown email, wrong password and disabled account share one error
    message so the response does not reveal whether an account exists.
    """
    default_error_messages = {
        'no_active_account': 'Invalid email or password.',
    }

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        token['name'] = user.name
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = AccountSummarySerializer(self.user).data
        return data


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """
    Self-service profile edit (PATCH /api/v1/users/me/).

    Role and active flag are not writable here; only an admin changes them.
    Clinician fields are ignored for non-clinicians, patient fields for
    non-patients.
    """
    CLINICIAN_FIELDS = ('license_number', 'specialty')
    PATIENT_FIELDS = ('tax_id',)

    class Meta:
        model = User
        fields = [
            'name',
            'phone',
            'avatar_url',
            'tax_id',
            'birth_date',
            'address',
            'license_number',
            'specialty',
        ]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name cannot be empty.')
        return value

    def validate(self, attrs):
        role = self.instance.role
        if role != RoleChoices.CLINICIAN:
            for field in self.CLINICIAN_FIELDS:
                attrs.pop(field, None)
        if role != RoleChoices.PATIENT:
            for field in self.PATIENT_FIELDS:
                attrs.pop(field, None)
        return attrs
