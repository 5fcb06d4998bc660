"""
Messaging URLs - outbound links, reminders, history, templates
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    SendMessageView,
    BulkReminderView,
    TestMessageView,
    MessageHistoryViewSet,
    MessageTemplateViewSet,
)

router = DefaultRouter()
router.register(r'history', MessageHistoryViewSet, basename='message-history')
router.register(r'templates', MessageTemplateViewSet, basename='message-template')

urlpatterns = [
    path('send/', SendMessageView.as_view(), name='message-send'),
    path('reminders/', BulkReminderView.as_view(), name='message-reminders'),
    path('test/', TestMessageView.as_view(), name='message-test'),
    path('', include(router.urls)),
]
