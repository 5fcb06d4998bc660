"""
Authz models: auth_user (every account, whatever its role), user_audit_log.
"""
import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin


# ============================================================================
# Enums
# ============================================================================

class RoleChoices(models.TextChoices):
    """
    Fixed account roles. The role decides which screens and endpoints
    an account can reach.

    - ADMIN: clinic administration, full access
    - BILLING: financial ledger
    - SCHEDULING: reception desk, appointments and patient messaging
    - CLINICIAN: doctors, own agenda and medical records
    - PATIENT: own appointments, records and invoices (read-only)
    """
    ADMIN = 'admin', 'Admin'
    BILLING = 'billing', 'Billing'
    SCHEDULING = 'scheduling', 'Scheduling'
    CLINICIAN = 'clinician', 'Clinician'
    PATIENT = 'patient', 'Patient'


# ============================================================================
# User Management
# ============================================================================

class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', RoleChoices.ADMIN)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Account for every person known to the clinic.

    Staff, doctors and patients all live in this table; the role decides
    which profile fields are meaningful:
    - clinician: license_number, specialty
    - patient: tax_id, birth_date, address

    Accounts are normally disabled through is_active rather than deleted.
    Hard deletion is refused while appointments or medical records still
    reference the account.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    name = models.CharField(max_length=255)
    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.PATIENT
    )
    phone = models.CharField(max_length=30, blank=True, default='')
    avatar_url = models.URLField(max_length=500, blank=True, default='')

    # Patient profile
    tax_id = models.CharField(max_length=20, blank=True, default='', help_text='National tax id (CPF)')
    birth_date = models.DateField(blank=True, null=True)
    address = models.CharField(max_length=500, blank=True, default='')

    # Clinician profile
    license_number = models.CharField(max_length=30, blank=True, default='', help_text='Medical license (CRM)')
    specialty = models.CharField(max_length=100, blank=True, default='')

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)  # Required for admin access
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'auth_user'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['email'], name='idx_user_email'),
            models.Index(fields=['is_active'], name='idx_user_active'),
            models.Index(fields=['role'], name='idx_user_role'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"


# ============================================================================
# User Administration Audit Log
# ============================================================================

class UserAuditActionChoices(models.TextChoices):
    """Actions that can be audited for user administration."""
    CREATE_USER = 'create_user', 'Create User'
    UPDATE_USER = 'update_user', 'Update User'
    RESET_PASSWORD = 'reset_password', 'Reset Password'
    CHANGE_PASSWORD = 'change_password', 'Change Password'
    DEACTIVATE_USER = 'deactivate_user', 'Deactivate User'
    ACTIVATE_USER = 'activate_user', 'Activate User'
    DELETE_USER = 'delete_user', 'Delete User'


class UserAuditLog(models.Model):
    """
    Audit trail for user administration actions.

    target_user is nulled when the account is hard-deleted; the deleted
    email is kept in metadata.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    actor_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='admin_actions',
        help_text='Admin user who performed the action'
    )

    target_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='audit_logs',
        help_text='User who was affected by the action'
    )

    action = models.CharField(
        max_length=20,
        choices=UserAuditActionChoices.choices
    )

    metadata = models.JSONField(
        default=dict,
        help_text='Changed fields, before/after values, IP address, etc.'
    )

    class Meta:
        db_table = 'user_audit_log'
        verbose_name = 'User Audit Log'
        verbose_name_plural = 'User Audit Logs'
        indexes = [
            models.Index(fields=['created_at'], name='idx_user_audit_created'),
            models.Index(fields=['actor_user'], name='idx_user_audit_actor'),
            models.Index(fields=['target_user'], name='idx_user_audit_target'),
            models.Index(fields=['action'], name='idx_user_audit_action'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        actor = self.actor_user.email if self.actor_user else 'system'
        target = self.target_user.email if self.target_user else 'deleted'
        return f"{self.action} on {target} by {actor}"
