from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, UserAuditLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'name', 'role', 'is_active', 'is_staff', 'created_at']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['email', 'name']  # Required for autocomplete_fields
    readonly_fields = ['id', 'created_at', 'updated_at', 'last_login']

    fieldsets = (
        (None, {'fields': ('id', 'email', 'password')}),
        ('Personal Info', {'fields': ('name', 'role', 'phone', 'avatar_url')}),
        ('Patient Profile', {'fields': ('tax_id', 'birth_date', 'address')}),
        ('Clinician Profile', {'fields': ('license_number', 'specialty')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'created_at', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2', 'is_active', 'is_staff'),
        }),
    )

    ordering = ['email']


@admin.register(UserAuditLog)
class UserAuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'action', 'actor_user', 'target_user']
    list_filter = ['action', 'created_at']
    search_fields = ['actor_user__email', 'target_user__email']
    readonly_fields = ['id', 'created_at', 'actor_user', 'target_user', 'action', 'metadata']

    def has_add_permission(self, request):
        # Audit logs are written by the API only
        return False

    def has_delete_permission(self, request, obj=None):
        return False
