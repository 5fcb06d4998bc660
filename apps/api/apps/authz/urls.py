"""
Authz URLs - sign-in, session and user administration
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from .views import LoginView, CurrentAccountView
from .views_users import UserAdminViewSet

router = DefaultRouter()
router.register(r'users', UserAdminViewSet, basename='user-admin')

urlpatterns = [
    path('auth/token/', LoginView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/token/verify/', TokenVerifyView.as_view(), name='token_verify'),
    path('auth/me/', CurrentAccountView.as_view(), name='auth-me'),
    path('', include(router.urls)),
]
