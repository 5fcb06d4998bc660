"""
Messaging views: outbound links, bulk reminders, test message, history,
templates.
"""
from rest_framework import mixins, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.observability.events import log_domain_event
from .models import MessageLog, MessageTemplate
from .permissions import MessageTemplatePermission, MessagingPermission
from .serializers import (
    BulkReminderSerializer,
    MessageLogSerializer,
    MessageTemplateSerializer,
    SendMessageSerializer,
)
from .services import MessagingError, send_bulk_reminders, send_message, send_test_message


class SendMessageView(APIView):
    """
    POST /api/v1/messaging/send/

    Body:
    {
        "appointment": "<uuid>" | "patient": "<uuid>",
        "template": "<uuid>" | "text": "Hello {patient_name}..."
    }

    Returns the history row and the link to open. Delivery is not
    confirmed; the row is recorded as sent as soon as the link exists.
    """
    permission_classes = [MessagingPermission]

    def post(self, request):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            message_log = send_message(
                patient=data['patient'],
                body=data['body'],
                appointment=data.get('appointment'),
                sent_by=request.user,
            )
        except MessagingError as exc:
            return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {'link': message_log.link, 'message': MessageLogSerializer(message_log).data},
            status=status.HTTP_201_CREATED
        )


class BulkReminderView(APIView):
    """
    POST /api/v1/messaging/reminders/

    Body (all optional): {"date": "YYYY-MM-DD", "template": "<uuid>"}
    Defaults to tomorrow's scheduled appointments and the Reminder template.
    """
    permission_classes = [MessagingPermission]

    def post(self, request):
        serializer = BulkReminderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        template = serializer.validated_data.get('template')

        result = send_bulk_reminders(
            date=serializer.validated_data.get('date'),
            body=template.body if template else None,
            sent_by=request.user,
        )
        result['date'] = result['date'].isoformat()
        return Response(result, status=status.HTTP_200_OK)


class TestMessageView(APIView):
    """
    POST /api/v1/messaging/test/

    Link to the clinic's own number, logged with status test.
    """
    permission_classes = [MessagingPermission]

    def post(self, request):
        try:
            message_log = send_test_message(sent_by=request.user)
        except MessagingError as exc:
            return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {'link': message_log.link, 'message': MessageLogSerializer(message_log).data},
            status=status.HTTP_201_CREATED
        )


class MessageHistoryViewSet(mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            mixins.DestroyModelMixin,
                            viewsets.GenericViewSet):
    """
    Message history.

    Endpoints:
    - GET /api/v1/messaging/history/
    - GET/DELETE /api/v1/messaging/history/{id}/

    Query parameters:
    - ?status=sent|test
    """
    serializer_class = MessageLogSerializer
    permission_classes = [MessagingPermission]

    def get_queryset(self):
        queryset = MessageLog.objects.select_related('sent_by')
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset.order_by('-sent_at')

    def perform_destroy(self, instance):
        message_id = str(instance.id)
        instance.delete()
        log_domain_event(
            'message_log_deleted',
            entity_type='MessageLog',
            entity_id=message_id,
            entity_ids={'actor_user_id': str(self.request.user.id)},
        )


class MessageTemplateViewSet(viewsets.ModelViewSet):
    """
    Message templates.

    Endpoints:
    - GET/POST /api/v1/messaging/templates/
    - GET/PATCH/DELETE /api/v1/messaging/templates/{id}/

    RBAC:
    - Admin: Full CRUD
    - Scheduling: Read-only
    """
    queryset = MessageTemplate.objects.all().order_by('name')
    serializer_class = MessageTemplateSerializer
    permission_classes = [MessageTemplatePermission]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']
