# Seed the settings row and the default service catalog

from decimal import Decimal
from django.db import migrations


DEFAULT_SERVICES = [
    ('Neurological Consultation', Decimal('300.00'), 60),
    ('Neuropsychological Assessment', Decimal('450.00'), 90),
    ('Cognitive Therapy', Decimal('200.00'), 50),
    ('Electroencephalogram', Decimal('250.00'), 30),
]


def seed_defaults(apps, schema_editor):
    ClinicSettings = apps.get_model('core', 'ClinicSettings')
    Service = apps.get_model('core', 'Service')

    if not ClinicSettings.objects.exists():
        ClinicSettings.objects.create()

    for name, price, duration in DEFAULT_SERVICES:
        Service.objects.get_or_create(
            name=name,
            defaults={'price': price, 'duration_minutes': duration},
        )


def remove_defaults(apps, schema_editor):
    Service = apps.get_model('core', 'Service')
    Service.objects.filter(name__in=[name for name, _, _ in DEFAULT_SERVICES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_defaults, remove_defaults),
    ]
