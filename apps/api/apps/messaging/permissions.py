"""
Messaging permissions.

Only the front desk roles send messages or read the history.
"""
from apps.authz.models import RoleChoices
from apps.authz.permissions import RolePermission


class MessagingPermission(RolePermission):
    """
    - Admin, Scheduling: send links, read and prune history
    - Other roles: No access
    """
    read_roles = frozenset({RoleChoices.ADMIN, RoleChoices.SCHEDULING})
    write_roles = frozenset({RoleChoices.ADMIN, RoleChoices.SCHEDULING})


class MessageTemplatePermission(RolePermission):
    """
    - Admin: Full CRUD
    - Scheduling: Read-only
    """
    read_roles = frozenset({RoleChoices.SCHEDULING})
    write_roles = frozenset({RoleChoices.ADMIN})
