"""
Core views - Clinic settings, service catalog, navigation, dashboard, snapshot.
"""
from django.db import transaction
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import AdminWriteAuthenticatedRead
from apps.core.observability.events import log_domain_event
from apps.core.params import parse_bool_param
from .dashboard import dashboard_metrics
from .models import ClinicSettings, Service
from .navigation import SECTION_LABELS, menu_for, resolve_screen
from .serializers import ClinicSettingsSerializer, NavigationSerializer, ServiceSerializer
from .snapshot import build_snapshot


class ClinicSettingsView(APIView):
    """
    GET/PATCH /api/v1/settings/

    Any signed-in account reads; only Admin writes.
    """
    permission_classes = [AdminWriteAuthenticatedRead]

    def get(self, request):
        return Response(ClinicSettingsSerializer(ClinicSettings.load()).data)

    def patch(self, request):
        with transaction.atomic():
            instance = ClinicSettings.load()
            serializer = ClinicSettingsSerializer(instance, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()

        log_domain_event(
            'clinic_settings_updated',
            entity_type='ClinicSettings',
            entity_id=str(instance.id),
            entity_ids={'actor_user_id': str(request.user.id)},
            fields=sorted(serializer.validated_data),
        )
        return Response(serializer.data)


class ServiceViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the service catalog.

    Endpoints:
    - GET/POST /api/v1/services/
    - GET/PATCH/DELETE /api/v1/services/{id}/

    Query parameters:
    - ?include_inactive=true - Include disabled services (default: false)
    """
    serializer_class = ServiceSerializer
    permission_classes = [AdminWriteAuthenticatedRead]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = Service.objects.all()
        if self.action == 'list' and not parse_bool_param(self.request.query_params, 'include_inactive'):
            queryset = queryset.filter(is_active=True)
        return queryset.order_by('name')

    def perform_create(self, serializer):
        service = serializer.save()
        log_domain_event('service_created', entity_type='Service', entity_id=str(service.id))

    def perform_update(self, serializer):
        service = serializer.save()
        log_domain_event(
            'service_updated', entity_type='Service', entity_id=str(service.id),
            fields=sorted(serializer.validated_data),
        )

    def perform_destroy(self, instance):
        service_id = str(instance.id)
        instance.delete()
        log_domain_event('service_deleted', entity_type='Service', entity_id=service_id)


class NavigationView(APIView):
    """
    GET /api/v1/navigation/?section=<name>

    The caller's menu and the screen a requested section resolves to
    (dashboard when the section is not in the menu).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        role = request.user.role
        menu = [
            {'section': section, 'label': SECTION_LABELS.get(section, section)}
            for section in menu_for(role)
        ]
        data = {
            'role': role,
            'menu': menu,
            'screen': resolve_screen(role, request.query_params.get('section')),
        }
        return Response(NavigationSerializer(data).data)


class DashboardView(APIView):
    """
    GET /api/v1/dashboard/

    Counters for the caller's role.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({
            'role': request.user.role,
            'metrics': dashboard_metrics(request.user),
        })


class SnapshotView(APIView):
    """
    GET /api/v1/snapshot/

    Accounts, appointments, financial records, medical records and
    active services visible to the caller, in one response.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(build_snapshot(request.user), status=status.HTTP_200_OK)
