"""
Metrics instrumentation.

Prometheus counters and histograms for HTTP traffic and clinic operations.
"""
from prometheus_client import Counter, Histogram, Info


class MetricsRegistry:
    """
    Central metrics registry for the clinic API.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        """Initialize metrics registry."""
        self._setup_metrics()

    def _setup_metrics(self):
        """Setup all application metrics."""

        # ===================================================================
        # HTTP Metrics
        # ===================================================================
        self.http_requests_total = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'status']
        )

        self.http_request_duration_seconds = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration in seconds',
            ['method'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
        )

        self.exceptions_total = Counter(
            'exceptions_total',
            'Total exceptions',
            ['exception_type', 'location']
        )

        # ===================================================================
        # Scheduling Metrics
        # ===================================================================
        self.appointments_written_total = Counter(
            'clinic_appointments_written_total',
            'Appointment writes',
            ['operation', 'result']  # operation: create|update|transition|delete
        )

        self.appointment_slot_conflicts_total = Counter(
            'clinic_appointment_slot_conflicts_total',
            'Appointment writes rejected because the slot is taken',
            ['operation']
        )

        # ===================================================================
        # Finance Metrics
        # ===================================================================
        self.financial_records_created_total = Counter(
            'clinic_financial_records_created_total',
            'Financial records created',
            ['kind', 'source']  # source: manual|appointment
        )

        # ===================================================================
        # Messaging Metrics
        # ===================================================================
        self.messages_total = Counter(
            'clinic_messages_total',
            'Outbound message links generated',
            ['channel', 'result']  # channel: single|bulk_reminder|test
        )

        # ===================================================================
        # Accounts
        # ===================================================================
        self.login_attempts_total = Counter(
            'clinic_login_attempts_total',
            'Token endpoint login attempts',
            ['result']
        )

        self.build_info = Info('clinic_api_build', 'Build information')


# Global metrics instance
metrics = MetricsRegistry()
