"""
Authz views for sign-in and the current session.
"""
from rest_framework import permissions
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from apps.authz.serializers import AccountSummarySerializer, ClinicTokenObtainPairSerializer
from apps.core.observability import metrics


class LoginView(TokenObtainPairView):
    """
    POST /api/v1/auth/token/

    Body: {"email": "...", "password": "..."}
    Returns access + refresh tokens and the account summary.
    """
    serializer_class = ClinicTokenObtainPairSerializer
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'login'

    def post(self, request, *args, **kwargs):
        try:
            response = super().post(request, *args, **kwargs)
        except AuthenticationFailed:
            metrics.login_attempts_total.labels(result='failure').inc()
            raise
        metrics.login_attempts_total.labels(result='success').inc()
        return response


class CurrentAccountView(APIView):
    """
    GET /api/v1/auth/me/

    Identity, role and profile of the signed-in account.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(AccountSummarySerializer(request.user).data)
