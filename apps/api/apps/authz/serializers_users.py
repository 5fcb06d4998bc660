"""
User Administration Serializers.
"""
import random
import secrets
import string
from rest_framework import serializers
from apps.authz.models import User, RoleChoices

DEFAULT_SPECIALTY = 'General'

PROFILE_FIELDS = [
    'phone',
    'avatar_url',
    'tax_id',
    'birth_date',
    'address',
    'license_number',
    'specialty',
]


def generate_temporary_password(length=12):
    """Generate a secure temporary password meeting policy requirements."""
    special = '!@#$%^&*'
    chars = string.ascii_uppercase + string.ascii_lowercase + string.digits + special

    # At least one of each class
    password = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice(special),
    ]
    password += [secrets.choice(chars) for _ in range(length - 4)]
    random.SystemRandom().shuffle(password)

    return ''.join(password)


class UserListSerializer(serializers.ModelSerializer):
    """
    Serializer for User list view (Admin only).

    Used for:
    - GET /api/v1/users/ - List all users
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
            'is_active',
            'last_login',
            'created_at',
        ]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for User detail view (Admin only).

    Used for:
    - GET /api/v1/users/{id}/ - Get user detail
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
            *PROFILE_FIELDS,
            'is_active',
            'is_staff',
            'last_login',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class UserCreateSerializer(serializers.ModelSerializer):
    """
    Serializer for User creation (Admin only).

    Used for:
    - POST /api/v1/users/ - Create new user

    Generates a temporary password when none is given.
    """
    password = serializers.CharField(write_only=True, required=False, min_length=8, max_length=64)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'role',
            *PROFILE_FIELDS,
            'is_active',
            'password',
        ]
        read_only_fields = ['id']
        extra_kwargs = {
            'role': {'required': True},
        }

    def validate_email(self, value):
        """Ensure email is unique (case-insensitive)."""
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be empty.")
        return value

    def create(self, validated_data):
        password = validated_data.pop('password', None) or generate_temporary_password()

        if validated_data['role'] == RoleChoices.CLINICIAN and not validated_data.get('specialty'):
            validated_data['specialty'] = DEFAULT_SPECIALTY

        user = User.objects.create_user(password=password, **validated_data)

        # Shown once in the create response
        user._temporary_password = password
        return user


class UserUpdateSerializer(serializers.ModelSerializer):
    """
    Serializer for User update (Admin only).

    Used for:
    - PATCH /api/v1/users/{id}/ - Update user
    """

    class Meta:
        model = User
        fields = [
            'email',
            'name',
            'role',
            *PROFILE_FIELDS,
            'is_active',
        ]

    def validate_email(self, value):
        """Ensure email is unique (except for current user)."""
        value = value.strip().lower()
        if self.instance and self.instance.email.lower() != value:
            if User.objects.filter(email__iexact=value).exists():
                raise serializers.ValidationError("A user with this email already exists.")
        return value

    def validate(self, attrs):
        """Validate that we're not removing the last active admin."""
        if 'is_active' in attrs or 'role' in attrs:
            is_deactivating = attrs.get('is_active') is False and self.instance.is_active
            is_removing_admin = (
                'role' in attrs
                and attrs['role'] != RoleChoices.ADMIN
                and self.instance.role == RoleChoices.ADMIN
            )

            if is_deactivating or is_removing_admin:
                ensure_other_active_admin(self.instance)

        return attrs


def ensure_other_active_admin(user):
    """Raise if user is the last active admin."""
    if user.role != RoleChoices.ADMIN:
        return
    others = User.objects.filter(
        is_active=True,
        role=RoleChoices.ADMIN
    ).exclude(id=user.id)
    if not others.exists():
        raise serializers.ValidationError(
            "Cannot deactivate, delete or remove admin role from the last active administrator."
        )


class PasswordChangeSerializer(serializers.Serializer):
    """
    Serializer for password change.

    Used for:
    - POST /api/v1/users/change-password/ - User changes own password
    """
    old_password = serializers.CharField(required=True, write_only=True)
    new_password = serializers.CharField(required=True, write_only=True, min_length=8, max_length=64)

    def validate(self, attrs):
        user = self.context['user']
        if not user.check_password(attrs['old_password']):
            raise serializers.ValidationError({'old_password': 'Current password is incorrect.'})
        if attrs['old_password'] == attrs['new_password']:
            raise serializers.ValidationError({'new_password': 'New password must differ from the current one.'})
        return attrs

    def save(self):
        user = self.context['user']
        user.set_password(self.validated_data['new_password'])
        user.save(update_fields=['password'])
        return user
