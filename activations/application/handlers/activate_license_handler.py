"""
ActivateLicenseHandler.

Handler for activating a license from a remote script.
"""

import logging

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.dto.activation_dto import (
    ActivateLicenseResponseDTO,
    ActivationDTO,
)
from activations.domain.events import LicenseActivated
from activations.ports.activation_repository import ActivationRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    ActivationLimitExceededError,
    DomainException,
    DomainValidationError,
    LicenseNotActiveError,
    LicenseNotFoundError,
)
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import license_activations_total
from licenses.domain.license_key import hash_license_key

logger = logging.getLogger(__name__)

_RESULTS = (
    (LicenseNotFoundError, "not_found"),
    (LicenseNotActiveError, "not_active"),
    (ActivationLimitExceededError, "capacity_exceeded"),
    (DomainValidationError, "invalid"),
)


def _result_label(exc: DomainException) -> str:
    for exc_type, label in _RESULTS:
        if isinstance(exc, exc_type):
            return label
    return "error"


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(self, activation_repository: ActivationRepository, event_bus: EventBus = None):
        """Initialize handler with repositories."""
        self.activation_repository = activation_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: ActivateLicenseCommand) -> ActivateLicenseResponseDTO:
        """
        Handle activate license command.

        The license is looked up by the hash of the presented key. A machine
        that already holds an active slot (same server IP) gets that
        activation back instead of a second one.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivateLicenseResponseDTO with activation details

        Raises:
            LicenseNotFoundError: If no license has this key
            LicenseNotActiveError: If the license is suspended or revoked
            ActivationLimitExceededError: If every slot is taken
            DomainValidationError: If the server IP is malformed
        """
        try:
            claim = await self.activation_repository.claim(
                key_hash=hash_license_key(command.license_key),
                server_ip=command.server_ip,
                hostname=command.hostname,
                server_id=command.server_id,
            )
        except DomainException as exc:
            license_activations_total.labels(result=_result_label(exc)).inc()
            logger.info(
                "Activation refused",
                extra={"reason": exc.code, "server_ip": command.server_ip},
            )
            raise

        activation, license = claim.activation, claim.license
        license_activations_total.labels(result="created" if claim.created else "existing").inc()

        if claim.created:
            await self.event_bus.publish(
                LicenseActivated(
                    activation_id=activation.id,
                    license_id=license.id,
                    server_ip=str(activation.server_ip),
                    hostname=activation.hostname,
                    server_id=activation.server_id,
                )
            )
            logger.info(
                "License activated",
                extra={
                    "license_id": str(license.id),
                    "activation_id": str(activation.id),
                    "server_ip": str(activation.server_ip),
                },
            )

        return ActivateLicenseResponseDTO(
            activation=ActivationDTO.from_entity(activation),
            created=claim.created,
            max_activations=license.max_activations,
            active_activations=license.activation_count,
            remaining_activations=license.remaining_slots(license.activation_count),
        )
