"""
Core API URLs - Clinic settings, service catalog, navigation, dashboard, snapshot.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    ClinicSettingsView,
    ServiceViewSet,
    NavigationView,
    DashboardView,
    SnapshotView,
)

router = DefaultRouter()
router.register(r'services', ServiceViewSet, basename='service')

urlpatterns = [
    path('settings/', ClinicSettingsView.as_view(), name='clinic-settings'),
    path('navigation/', NavigationView.as_view(), name='navigation'),
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('snapshot/', SnapshotView.as_view(), name='snapshot'),
    path('', include(router.urls)),
]
