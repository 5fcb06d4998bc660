"""
URL configuration for the Clinic Management API.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from apps.core.observability.health import HealthzView, ReadyzView, MetricsView

urlpatterns = [
    # Health checks (no auth required)
    path('healthz', HealthzView.as_view(), name='healthz'),
    path('readyz', ReadyzView.as_view(), name='readyz'),
    path('metrics', MetricsView.as_view(), name='metrics'),

    # Admin
    path('admin/', admin.site.urls),

    # Private API (authentication required, except token endpoints)
    path('api/v1/', include('apps.core.urls')),  # Navigation, dashboard, snapshot, settings, services
    path('api/v1/', include('apps.authz.urls')),  # Auth tokens, session, user administration
    path('api/v1/clinical/', include('apps.clinical.urls')),  # Patients, doctors, appointments, medical records
    path('api/v1/finance/', include('apps.finance.urls')),  # Financial ledger
    path('api/v1/messaging/', include('apps.messaging.urls')),  # Templates, outbound links, history

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger-ui/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/schema/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
