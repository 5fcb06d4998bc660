"""
Finance permissions.

- Admin, Billing: full CRUD on the ledger
- Patient: read-only, limited to entries linked to own appointments
- Scheduling, Clinician: no access
"""
from apps.authz.models import RoleChoices
from apps.authz.permissions import RolePermission


class FinancialRecordPermission(RolePermission):
    read_roles = frozenset({RoleChoices.PATIENT})
    write_roles = frozenset({RoleChoices.ADMIN, RoleChoices.BILLING})


class FinanceSummaryPermission(RolePermission):
    read_roles = frozenset({RoleChoices.ADMIN, RoleChoices.BILLING})
