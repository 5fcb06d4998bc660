# Seed the default message templates

from django.db import migrations


DEFAULT_TEMPLATES = [
    (
        'Confirmation',
        'Hello {patient_name}, your appointment with {doctor_name} is confirmed '
        'for {date} at {time}. Clinic: {clinic_phone}',
    ),
    (
        'Reminder',
        'Hello {patient_name}, this is a reminder that you have an appointment '
        'tomorrow with {doctor_name} at {time}. Clinic: {clinic_phone}',
    ),
    (
        'Reschedule',
        'Hello {patient_name}, your appointment has been rescheduled to {date} '
        'at {time}. Clinic: {clinic_phone}',
    ),
    (
        'Cancellation',
        'Hello {patient_name}, your appointment on {date} has been canceled. '
        'We will contact you to reschedule. Clinic: {clinic_phone}',
    ),
    (
        'General',
        'Hi {patient_name}, this is the clinic! We are available for questions '
        'or bookings. Clinic: {clinic_phone}',
    ),
]


def seed_templates(apps, schema_editor):
    MessageTemplate = apps.get_model('messaging', 'MessageTemplate')
    for name, body in DEFAULT_TEMPLATES:
        MessageTemplate.objects.get_or_create(name=name, defaults={'body': body})


def remove_templates(apps, schema_editor):
    MessageTemplate = apps.get_model('messaging', 'MessageTemplate')
    MessageTemplate.objects.filter(name__in=[name for name, _ in DEFAULT_TEMPLATES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('messaging', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_templates, remove_templates),
    ]
