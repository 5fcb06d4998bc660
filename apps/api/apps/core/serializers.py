"""
Core serializers: clinic settings, service catalog, navigation, dashboard.
"""
from rest_framework import serializers

from .models import ClinicSettings, Service


class ClinicSettingsSerializer(serializers.ModelSerializer):
    """
    Clinic settings.

    Used for:
    - GET/PATCH /api/v1/settings/
    """
    working_hours_start = serializers.TimeField(format='%H:%M')
    working_hours_end = serializers.TimeField(format='%H:%M')

    class Meta:
        model = ClinicSettings
        fields = [
            'company_name',
            'company_address',
            'company_phone',
            'company_email',
            'whatsapp_number',
            'logo_url',
            'working_hours_start',
            'working_hours_end',
            'updated_at',
        ]
        read_only_fields = ['updated_at']

    def validate_company_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Company name cannot be empty.')
        return value

    def validate(self, attrs):
        start = attrs.get('working_hours_start', getattr(self.instance, 'working_hours_start', None))
        end = attrs.get('working_hours_end', getattr(self.instance, 'working_hours_end', None))
        if start and end and start >= end:
            raise serializers.ValidationError(
                {'working_hours_end': 'Working hours must end after they start.'}
            )
        return attrs


class ServiceSerializer(serializers.ModelSerializer):
    """
    Service catalog entry.

    Used for:
    - /api/v1/services/
    """
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    duration_minutes = serializers.IntegerField(min_value=1, required=False)

    class Meta:
        model = Service
        fields = [
            'id',
            'name',
            'price',
            'duration_minutes',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name cannot be empty.')
        return value


class MenuEntrySerializer(serializers.Serializer):
    section = serializers.CharField()
    label = serializers.CharField()


class NavigationSerializer(serializers.Serializer):
    role = serializers.CharField()
    menu = MenuEntrySerializer(many=True)
    screen = serializers.CharField()
