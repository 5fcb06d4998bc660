"""
Role menus and screen resolution.

Every role has a fixed, ordered menu. A requested section outside the
caller's menu resolves to the dashboard.
"""
from apps.authz.models import RoleChoices

DEFAULT_SCREEN = 'dashboard'

SECTION_LABELS = {
    'dashboard': 'Dashboard',
    'users': 'Users',
    'doctors': 'Doctors',
    'patients': 'Patients',
    'scheduling': 'Scheduling',
    'finance': 'Finance',
    'medical_records': 'Medical Records',
    'messaging': 'Messaging',
    'settings': 'Settings',
    'my_appointments': 'My Appointments',
    'absence_justification': 'Absence Justification',
    'profile': 'Profile',
    'my_records': 'My Records',
    'my_finance': 'My Finance',
}

ROLE_MENUS = {
    RoleChoices.ADMIN: (
        'dashboard', 'users', 'doctors', 'patients', 'scheduling',
        'finance', 'medical_records', 'messaging', 'settings',
    ),
    RoleChoices.BILLING: ('dashboard', 'finance'),
    RoleChoices.SCHEDULING: ('dashboard', 'scheduling', 'patients', 'messaging'),
    RoleChoices.CLINICIAN: (
        'dashboard', 'my_appointments', 'absence_justification',
        'medical_records', 'profile',
    ),
    RoleChoices.PATIENT: ('dashboard', 'profile', 'my_appointments', 'my_records', 'my_finance'),
}


def menu_for(role):
    """Ordered menu sections for role; unknown roles get the dashboard only."""
    return ROLE_MENUS.get(role, (DEFAULT_SCREEN,))


def resolve_screen(role, section):
    if section in menu_for(role):
        return section
    return DEFAULT_SCREEN
