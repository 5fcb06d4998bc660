"""
Tests for observability layer.

Validates that metrics, logs, and events are emitted correctly
without logging PHI/PII.
"""
import json
import logging
import time

import pytest
from unittest.mock import Mock, patch
from django.db import DatabaseError
from django.http import HttpResponse
from prometheus_client import REGISTRY

from apps.core.observability.correlation import (
    RequestCorrelationMiddleware,
    bind_user,
    clear_request_context,
    get_request_id,
    get_user_roles,
)
from apps.core.observability.logging import (
    SanitizedJSONFormatter,
    sanitize_dict,
)
from apps.core.observability.metrics import metrics
from apps.core.observability.events import (
    log_domain_event,
    log_message_rejected,
    log_slot_conflict,
)


@pytest.fixture(autouse=True)
def clean_request_context():
    yield
    clear_request_context()


class TestRequestCorrelation:
    """Test request correlation middleware."""

    def test_generates_request_id_if_missing(self):
        """Middleware generates request ID if not in headers."""
        middleware = RequestCorrelationMiddleware(lambda r: HttpResponse())
        request = Mock(META={}, path='/api/test', method='GET')
        request.user = Mock(is_authenticated=False)

        middleware.process_request(request)

        assert request.request_id
        assert get_request_id() == request.request_id

    def test_propagates_existing_request_id(self):
        """Middleware uses existing request ID from headers."""
        middleware = RequestCorrelationMiddleware(lambda r: HttpResponse())
        request = Mock(
            META={'HTTP_X_REQUEST_ID': 'test-request-123'},
            path='/api/test',
            method='GET'
        )
        request.user = Mock(is_authenticated=False)

        middleware.process_request(request)

        assert request.request_id == 'test-request-123'

    def test_adds_request_id_to_response_headers(self):
        """Middleware adds X-Request-ID to response."""
        middleware = RequestCorrelationMiddleware(lambda r: HttpResponse())
        request = Mock(
            META={},
            path='/api/test',
            method='GET',
            request_id='test-123',
            trace_id=None,
            start_time=time.time(),
        )

        result = middleware.process_response(request, HttpResponse())

        assert result['X-Request-ID'] == 'test-123'
        assert not result.has_header('X-Trace-ID')

    def test_bind_user_records_role(self):
        user = Mock(is_authenticated=True, id='user-1', role='scheduling')

        bind_user(user)

        assert get_user_roles() == ['scheduling']

    @pytest.mark.django_db
    def test_response_header_on_real_request(self, client):
        response = client.get('/healthz', HTTP_X_REQUEST_ID='abc-123')

        assert response['X-Request-ID'] == 'abc-123'


class TestSanitization:
    """Test PHI/PII sanitization."""

    def test_sanitize_dict_redacts_sensitive_fields(self):
        """Sanitize function removes PHI/PII fields."""
        data = {
            'id': '123',
            'email': 'maria@example.com',
            'phone': '98988887777',
            'diagnosis': 'Migraine',
            'notes': 'Allergic to dipyrone',
            'patient_name': 'Maria Silva',
            'status': 'scheduled',
        }

        sanitized = sanitize_dict(data)

        assert sanitized['id'] == '123'
        assert sanitized['status'] == 'scheduled'
        for key in ('email', 'phone', 'diagnosis', 'notes', 'patient_name'):
            assert sanitized[key] == '[REDACTED]'

    def test_sanitize_dict_handles_nested_objects(self):
        """Sanitization works on nested dictionaries."""
        data = {
            'appointment': {
                'id': '456',
                'patient': {'name': 'ok', 'phone': '98988887777', 'id': 'patient-123'},
            },
            'items': [{'message': 'Hello', 'channel': 'single'}],
        }

        sanitized = sanitize_dict(data)

        assert sanitized['appointment']['patient']['id'] == 'patient-123'
        assert sanitized['appointment']['patient']['phone'] == '[REDACTED]'
        assert sanitized['items'] == [{'message': '[REDACTED]', 'channel': 'single'}]

    def test_allowed_fields_not_redacted(self):
        """IDs and non-sensitive fields are preserved."""
        data = {
            'appointment_id': 'appointment-123',
            'doctor_id': 'doctor-456',
            'status': 'confirmed',
            'open_delay_ms': 3000,
        }

        assert sanitize_dict(data) == data

    def test_formatter_redacts_extra_fields(self):
        formatter = SanitizedJSONFormatter()
        record = logging.LogRecord('clinic', logging.INFO, __file__, 1, 'Sent', None, None)
        record.to_number = '98988887777'
        record.appointment_id = 'appointment-1'

        payload = json.loads(formatter.format(record))

        assert payload['message'] == 'Sent'
        assert payload['to_number'] == '[REDACTED]'
        assert payload['appointment_id'] == 'appointment-1'


class TestMetricsRegistry:

    def test_clinic_metrics_are_defined(self):
        for name in (
            'http_requests_total',
            'appointments_written_total',
            'appointment_slot_conflicts_total',
            'financial_records_created_total',
            'messages_total',
            'login_attempts_total',
        ):
            assert hasattr(metrics, name)

    def test_slot_conflict_increments_counter(self):
        labels = {'operation': 'create'}
        before = REGISTRY.get_sample_value('clinic_appointment_slot_conflicts_total', labels) or 0

        with patch('apps.core.observability.events.logger'):
            log_slot_conflict('create', 'doctor-1', '2024-12-20', '09:00', 'appointment-1')

        assert REGISTRY.get_sample_value('clinic_appointment_slot_conflicts_total', labels) == before + 1


class TestDomainEvents:
    """Test domain event logging."""

    @patch('apps.core.observability.events.logger')
    def test_log_domain_event_structure(self, mock_logger):
        """Domain events have correct structure."""
        log_domain_event(
            'test_event',
            entity_type='Appointment',
            entity_id='appointment-123',
            result='success',
            custom_field='value'
        )

        mock_logger.info.assert_called_once()
        extra = mock_logger.info.call_args[1]['extra']
        assert extra['event'] == 'test_event'
        assert extra['entity_type'] == 'Appointment'
        assert extra['entity_id'] == 'appointment-123'
        assert extra['result'] == 'success'
        assert extra['custom_field'] == 'value'

    @patch('apps.core.observability.events.logger')
    def test_extra_fields_are_sanitized(self, mock_logger):
        log_domain_event('test_event', email='maria@example.com')

        extra = mock_logger.info.call_args[1]['extra']
        assert extra['email'] == '[REDACTED]'

    @patch('apps.core.observability.events.logger')
    def test_blocked_events_log_as_warning(self, mock_logger):
        log_message_rejected('single', 'invalid_phone', patient_id='patient-1')

        mock_logger.warning.assert_called_once()
        extra = mock_logger.warning.call_args[1]['extra']
        assert extra['event'] == 'message_rejected'
        assert extra['reason'] == 'invalid_phone'
        assert extra['patient_id'] == 'patient-1'


@pytest.mark.django_db
class TestHealthChecks:
    """Test health check endpoints."""

    def test_healthz_returns_200(self, client):
        """Health check returns 200 OK."""
        response = client.get('/healthz')

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'ok'
        assert 'version' in data

    def test_readyz_checks_database(self, client):
        response = client.get('/readyz')

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'ready'
        assert data['checks']['database'] is True

    @patch('apps.core.observability.health.connection')
    def test_readyz_fails_on_db_error(self, mock_connection, client):
        """Readiness check returns 503 on DB failure."""
        mock_connection.cursor.side_effect = DatabaseError('DB connection failed')

        response = client.get('/readyz')

        assert response.status_code == 503
        data = response.json()
        assert data['status'] == 'not_ready'
        assert data['checks']['database'] is False

    def test_metrics_exposition(self, client):
        response = client.get('/metrics')

        assert response.status_code == 200
        assert b'clinic_appointments_written_total' in response.content
