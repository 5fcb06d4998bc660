"""Core app configuration."""
from django.apps import AppConfig
from django.conf import settings


class CoreConfig(AppConfig):
    """Configuration for core app."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'

    def ready(self):
        from apps.core.observability.metrics import metrics
        metrics.build_info.info({
            'version': settings.VERSION,
            'commit': settings.COMMIT_HASH or 'unknown',
        })
