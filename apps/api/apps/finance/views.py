"""
Finance views: ledger CRUD and monthly summary.
"""
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.models import RoleChoices
from apps.core.params import parse_date_param, parse_uuid_param
from apps.core.observability.events import log_domain_event, log_financial_record_created
from .models import FinancialRecord
from .permissions import FinancialRecordPermission, FinanceSummaryPermission
from .serializers import FinancialRecordSerializer, MonthlySummarySerializer
from .services import monthly_summary


class FinancialRecordViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the ledger.

    Endpoints:
    - GET /api/v1/finance/records/ - List entries
    - POST /api/v1/finance/records/ - Create entry
    - GET/PATCH/DELETE /api/v1/finance/records/{id}/

    Query parameters:
    - ?kind=revenue|expense
    - ?status=pending|paid|canceled
    - ?date_from=YYYY-MM-DD, ?date_to=YYYY-MM-DD
    - ?appointment_id=<uuid>

    RBAC:
    - Admin, Billing: full CRUD
    - Patient: read-only, own appointments' entries
    """
    serializer_class = FinancialRecordSerializer
    permission_classes = [FinancialRecordPermission]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = FinancialRecord.objects.select_related('appointment')

        if self.request.user.role == RoleChoices.PATIENT:
            queryset = queryset.filter(appointment__patient=self.request.user)

        params = self.request.query_params
        for param in ('kind', 'status'):
            value = params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})

        date_from = parse_date_param(params, 'date_from')
        if date_from:
            queryset = queryset.filter(date__gte=date_from)

        date_to = parse_date_param(params, 'date_to')
        if date_to:
            queryset = queryset.filter(date__lte=date_to)

        appointment_id = parse_uuid_param(params, 'appointment_id')
        if appointment_id:
            queryset = queryset.filter(appointment_id=appointment_id)

        return queryset.order_by('-date', '-created_at')

    def perform_create(self, serializer):
        record = serializer.save()
        log_financial_record_created(record)

    def perform_update(self, serializer):
        record = serializer.save()
        log_domain_event(
            'financial_record_updated',
            entity_type='FinancialRecord',
            entity_id=str(record.id),
            fields=sorted(serializer.validated_data),
            status=record.status,
        )

    def perform_destroy(self, instance):
        record_id = str(instance.id)
        instance.delete()
        log_domain_event('financial_record_deleted', entity_type='FinancialRecord', entity_id=record_id)


class MonthlySummaryView(APIView):
    """
    GET /api/v1/finance/summary/?year=YYYY&month=MM

    Defaults to the current month.
    """
    permission_classes = [FinanceSummaryPermission]

    def get(self, request):
        today = timezone.localdate()
        try:
            year = int(request.query_params.get('year', today.year))
            month = int(request.query_params.get('month', today.month))
        except ValueError:
            return Response({'error': 'year and month must be integers'}, status=status.HTTP_400_BAD_REQUEST)

        if not 1 <= month <= 12:
            return Response({'error': 'month must be between 1 and 12'}, status=status.HTTP_400_BAD_REQUEST)

        return Response(MonthlySummarySerializer(monthly_summary(year, month)).data)
