"""Messaging serializers."""
from rest_framework import serializers

from apps.authz.models import User, RoleChoices
from apps.clinical.models import Appointment
from .models import MessageLog, MessageTemplate


class MessageTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = MessageTemplate
        fields = ['id', 'name', 'body', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_body(self, value):
        if not value.strip():
            raise serializers.ValidationError('Template body cannot be empty.')
        return value


class MessageLogSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    sent_by_name = serializers.CharField(source='sent_by.name', read_only=True, default=None)

    class Meta:
        model = MessageLog
        fields = [
            'id',
            'from_number',
            'to_number',
            'patient_name',
            'message',
            'link',
            'status',
            'status_display',
            'appointment',
            'sent_by',
            'sent_by_name',
            'sent_at',
        ]
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    """
    Payload for POST /api/v1/messaging/send/

    Either an appointment (the patient comes from it) or a patient, and
    either a template or free text. Free text wins over the template.
    """
    appointment = serializers.PrimaryKeyRelatedField(
        queryset=Appointment.objects.select_related('patient', 'doctor'),
        required=False,
        allow_null=True
    )
    patient = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=RoleChoices.PATIENT),
        required=False,
        allow_null=True
    )
    template = serializers.PrimaryKeyRelatedField(
        queryset=MessageTemplate.objects.filter(is_active=True),
        required=False,
        allow_null=True
    )
    text = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)

    def validate(self, attrs):
        appointment = attrs.get('appointment')
        patient = attrs.get('patient')

        if appointment is None and patient is None:
            raise serializers.ValidationError('Select an appointment or a patient.')
        if appointment is not None:
            if patient is not None and patient.id != appointment.patient_id:
                raise serializers.ValidationError(
                    {'patient': 'The patient does not match the appointment.'}
                )
            attrs['patient'] = appointment.patient

        text = attrs.get('text') or ''
        if not text.strip():
            template = attrs.get('template')
            if template is None:
                raise serializers.ValidationError('Type a message or choose a template.')
            text = template.body
        attrs['body'] = text
        return attrs


class BulkReminderSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)
    template = serializers.PrimaryKeyRelatedField(
        queryset=MessageTemplate.objects.filter(is_active=True),
        required=False,
        allow_null=True
    )
