# Initial schema for appointments, medical records and absence justifications

import uuid
from decimal import Decimal
import django.core.validators
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField()),
                ('time', models.TimeField()),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('confirmed', 'Confirmed'), ('completed', 'Completed'), ('canceled', 'Canceled')], default='scheduled', max_length=20)),
                ('appointment_type', models.CharField(default='consultation', max_length=100)),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='doctor_appointments', to=settings.AUTH_USER_MODEL)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='patient_appointments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Appointment',
                'verbose_name_plural': 'Appointments',
                'db_table': 'appointment',
                'ordering': ['date', 'time'],
                'indexes': [
                    models.Index(fields=['patient'], name='idx_appointment_patient'),
                    models.Index(fields=['doctor', 'date'], name='idx_appointment_doctor_date'),
                    models.Index(fields=['date'], name='idx_appointment_date'),
                    models.Index(fields=['status'], name='idx_appointment_status'),
                ],
                'constraints': [
                    models.UniqueConstraint(
                        condition=~models.Q(status='canceled'),
                        fields=('doctor', 'date', 'time'),
                        name='uniq_appointment_active_slot',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='MedicalRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField()),
                ('diagnosis', models.TextField()),
                ('treatment', models.TextField()),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='doctor_medical_records', to=settings.AUTH_USER_MODEL)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='patient_medical_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Medical Record',
                'verbose_name_plural': 'Medical Records',
                'db_table': 'medical_record',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['patient'], name='idx_medrec_patient'),
                    models.Index(fields=['doctor'], name='idx_medrec_doctor'),
                    models.Index(fields=['date'], name='idx_medrec_date'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AbsenceJustification',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('reason', models.CharField(choices=[('illness', 'Illness'), ('family_emergency', 'Family emergency'), ('medical_commitment', 'Medical commitment'), ('congress', 'Congress or course'), ('transport', 'Transport problem'), ('other', 'Other')], max_length=30)),
                ('description', models.TextField(validators=[django.core.validators.MinLengthValidator(10)])),
                ('date', models.DateField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('appointment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='absence_justifications', to='clinical.appointment')),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='absence_justifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Absence Justification',
                'verbose_name_plural': 'Absence Justifications',
                'db_table': 'absence_justification',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['doctor'], name='idx_absence_doctor'),
                ],
            },
        ),
    ]
