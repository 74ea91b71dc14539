"""
Release handlers.

Handlers for releasing activations and repairing activation counts.
"""

import logging

from activations.application.commands.release_activation import (
    ReconcileActivationCountsCommand,
    ReleaseActivationCommand,
    ReleaseServerActivationsCommand,
)
from activations.application.dto.activation_dto import ActivationDTO
from activations.domain.events import ActivationReleased
from activations.ports.activation_repository import ActivationRelease, ActivationRepository
from core.domain.events import EventBus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import activation_count_drift_total, license_activations_released_total

logger = logging.getLogger(__name__)


class _ReleasePublisher:
    def __init__(self, activation_repository: ActivationRepository, event_bus: EventBus = None):
        """Initialize handler with repositories."""
        self.activation_repository = activation_repository
        self.event_bus = event_bus or default_event_bus

    async def _publish(self, release: ActivationRelease, reason: str) -> ActivationDTO:
        activation = release.activation
        await self.event_bus.publish(
            ActivationReleased(
                activation_id=activation.id,
                license_id=activation.license_id,
                server_ip=str(activation.server_ip),
            )
        )
        license_activations_released_total.labels(reason=reason).inc()
        logger.info(
            "Activation released",
            extra={
                "license_id": str(activation.license_id),
                "activation_id": str(activation.id),
                "reason": reason,
            },
        )
        return ActivationDTO.from_entity(activation)


class ReleaseActivationHandler(_ReleasePublisher):
    """Handler for ReleaseActivationCommand."""

    async def handle(self, command: ReleaseActivationCommand) -> ActivationDTO:
        """
        Handle release activation command.

        Args:
            command: ReleaseActivationCommand

        Returns:
            The released activation

        Raises:
            LicenseNotFoundError: If license not found
            ActivationNotFoundError: If the activation is not an active
                activation of this license
        """
        release = await self.activation_repository.release(
            command.license_id, command.activation_id
        )
        return await self._publish(release, reason="operator")


class ReleaseServerActivationsHandler(_ReleasePublisher):
    """Handler for ReleaseServerActivationsCommand."""

    async def handle(self, command: ReleaseServerActivationsCommand) -> int:
        """
        Handle release server activations command.

        Used when an externally managed server is destroyed: every active
        activation carrying its id is released, whichever license it uses.

        Returns:
            Number of released activations
        """
        releases = await self.activation_repository.release_by_server(command.server_id)
        for release in releases:
            await self._publish(release, reason="server_removed")
        return len(releases)


class ReconcileActivationCountsHandler:
    """Handler for ReconcileActivationCountsCommand."""

    def __init__(self, activation_repository: ActivationRepository):
        """Initialize handler with repositories."""
        self.activation_repository = activation_repository

    async def handle(self, command: ReconcileActivationCountsCommand) -> int:
        """
        Handle reconcile command.

        Returns:
            Number of licenses whose cached count differed from the live count
        """
        drifted = await self.activation_repository.reconcile_counts(dry_run=command.dry_run)
        if drifted:
            activation_count_drift_total.inc(drifted)
        logger.info(
            "Activation counts reconciled",
            extra={"drifted": drifted, "dry_run": command.dry_run},
        )
        return drifted
