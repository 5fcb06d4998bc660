# Initial schema for accounts and user administration audit log

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=255, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('role', models.CharField(
                    choices=[
                        ('admin', 'Admin'),
                        ('billing', 'Billing'),
                        ('scheduling', 'Scheduling'),
                        ('clinician', 'Clinician'),
                        ('patient', 'Patient'),
                    ],
                    default='patient',
                    max_length=20
                )),
                ('phone', models.CharField(blank=True, default='', max_length=30)),
                ('avatar_url', models.URLField(blank=True, default='', max_length=500)),
                ('tax_id', models.CharField(blank=True, default='', help_text='National tax id (CPF)', max_length=20)),
                ('birth_date', models.DateField(blank=True, null=True)),
                ('address', models.CharField(blank=True, default='', max_length=500)),
                ('license_number', models.CharField(blank=True, default='', help_text='Medical license (CRM)', max_length=30)),
                ('specialty', models.CharField(blank=True, default='', max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('is_staff', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'User',
                'verbose_name_plural': 'Users',
                'db_table': 'auth_user',
                'indexes': [
                    models.Index(fields=['email'], name='idx_user_email'),
                    models.Index(fields=['is_active'], name='idx_user_active'),
                    models.Index(fields=['role'], name='idx_user_role'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UserAuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('action', models.CharField(
                    choices=[
                        ('create_user', 'Create User'),
                        ('update_user', 'Update User'),
                        ('reset_password', 'Reset Password'),
                        ('change_password', 'Change Password'),
                        ('deactivate_user', 'Deactivate User'),
                        ('activate_user', 'Activate User'),
                        ('delete_user', 'Delete User'),
                    ],
                    max_length=20
                )),
                ('metadata', models.JSONField(default=dict, help_text='Changed fields, before/after values, IP address, etc.')),
                ('actor_user', models.ForeignKey(help_text='Admin user who performed the action', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='admin_actions', to=settings.AUTH_USER_MODEL)),
                ('target_user', models.ForeignKey(help_text='User who was affected by the action', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'User Audit Log',
                'verbose_name_plural': 'User Audit Logs',
                'db_table': 'user_audit_log',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_at'], name='idx_user_audit_created'),
                    models.Index(fields=['actor_user'], name='idx_user_audit_actor'),
                    models.Index(fields=['target_user'], name='idx_user_audit_target'),
                    models.Index(fields=['action'], name='idx_user_audit_action'),
                ],
            },
        ),
    ]
