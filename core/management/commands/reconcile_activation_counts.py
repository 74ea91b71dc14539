"""
Django management command to repair cached activation counts.

Recomputes ``License.activation_count`` from the live active activation
rows. Run it after manual database edits or from cron; the Celery beat
schedule runs the same job hourly.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from activations.application.commands.release_activation import ReconcileActivationCountsCommand
from activations.application.handlers.release_activation_handlers import (
    ReconcileActivationCountsHandler,
)
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to reconcile activation counts."""

    help = "Recompute cached activation counts from live activations"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - report drift without updating licenses",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        dry_run = options["dry_run"]
        handler = ReconcileActivationCountsHandler(DjangoActivationRepository())
        drifted = async_to_sync(handler.handle)(ReconcileActivationCountsCommand(dry_run=dry_run))

        if dry_run:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes were made"))
        if drifted:
            self.stdout.write(f"Found {drifted} license(s) with a drifted activation count")
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS("Activation counts reconciled"))
