"""
Query-parameter parsing shared by list endpoints.

Invalid values raise DRF ValidationError (HTTP 400) instead of reaching
the ORM.
"""
import uuid
from datetime import datetime

from rest_framework.exceptions import ValidationError


def parse_date_param(params, name):
    """Return params[name] as a date (YYYY-MM-DD), or None when absent."""
    value = params.get(name)
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError({name: 'Invalid date format. Use YYYY-MM-DD.'})


def parse_uuid_param(params, name):
    """Return params[name] as a UUID, or None when absent."""
    value = params.get(name)
    if not value:
        return None
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        raise ValidationError({name: 'Invalid id.'})


def parse_bool_param(params, name, default=False):
    value = params.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes')
