"""
App configuration for the core app.
"""

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    """Wires event handlers and tracing once the app registry is ready."""

    name = "core"
    verbose_name = "Core"

    def ready(self):
        """Called when Django starts."""
        from core.infrastructure.event_handlers import register_event_handlers

        # The bus ignores a second subscription of the same handler type.
        register_event_handlers()

        if getattr(settings, "OTEL_ENABLED", False):
            from core.instrumentation import setup_opentelemetry

            setup_opentelemetry()
            logger.info("Observability setup complete")
