"""
Celery tasks for background processing.

Periodic maintenance of the activation counters.
"""
import logging

from asgiref.sync import async_to_sync

from LicenseCapacityService.celery import app

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3)
def reconcile_activation_counts_task(self, dry_run: bool = False) -> int:
    """
    Rewrite every cached activation count from the live activation rows.

    Args:
        dry_run: Only report drifted licenses

    Returns:
        Number of licenses whose cached count was wrong
    """
    from activations.application.commands.release_activation import (
        ReconcileActivationCountsCommand,
    )
    from activations.application.handlers.release_activation_handlers import (
        ReconcileActivationCountsHandler,
    )
    from activations.infrastructure.repositories.django_activation_repository import (
        DjangoActivationRepository,
    )

    handler = ReconcileActivationCountsHandler(DjangoActivationRepository())
    try:
        return async_to_sync(handler.handle)(ReconcileActivationCountsCommand(dry_run=dry_run))
    except Exception as exc:
        logger.error("Activation count reconciliation failed", exc_info=True)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
