"""
JWT authentication that binds the account to the logging context.
"""
from rest_framework_simplejwt.authentication import JWTAuthentication

from apps.core.observability.correlation import bind_user


class CorrelatedJWTAuthentication(JWTAuthentication):
    """JWTAuthentication that records user id and role for request logs."""

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is not None:
            bind_user(result[0])
        return result
