"""
Authz permissions shared by every app.

Each account carries exactly one role (see RoleChoices); permission
classes compare request.user.role against the roles allowed for the
endpoint and method.
"""
from rest_framework import permissions
from apps.authz.models import RoleChoices


def user_role(request):
    """Role of the authenticated caller, or None."""
    if not request.user or not request.user.is_authenticated:
        return None
    return request.user.role


class IsAdmin(permissions.BasePermission):
    """
    Permission class that only allows Admin role users.

    Used for user administration endpoints.
    """

    def has_permission(self, request, view):
        return user_role(request) == RoleChoices.ADMIN


class RolePermission(permissions.BasePermission):
    """
    Base class for role tables.

    Subclasses set read_roles (GET, HEAD, OPTIONS) and write_roles
    (POST, PUT, PATCH, DELETE).
    """
    read_roles = frozenset()
    write_roles = frozenset()

    def has_permission(self, request, view):
        role = user_role(request)
        if role is None:
            return False

        if request.method in permissions.SAFE_METHODS:
            return role in self.read_roles or role in self.write_roles

        return role in self.write_roles


class AdminWriteAuthenticatedRead(RolePermission):
    """
    Any signed-in account reads, only Admin writes.

    Used for clinic settings and the service catalog.
    """
    read_roles = frozenset(RoleChoices.values)
    write_roles = frozenset({RoleChoices.ADMIN})
