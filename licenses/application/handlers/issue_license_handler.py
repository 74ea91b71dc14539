"""
IssueLicenseHandler.

Handles the issue license command.
"""

import logging

from django.conf import settings

from core.domain.events import EventBus
from core.domain.exceptions import DomainValidationError
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_issued_total
from customers.ports.customer_repository import CustomerRepository
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import IssuedLicenseDTO, LicenseDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from licenses.domain.services import LicenseKeyGenerator
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        customer_repository: CustomerRepository,
        license_repository: LicenseRepository,
        event_bus: EventBus = None,
        key_prefix: str = None,
    ):
        """Initialize handler with repositories."""
        self.customer_repository = customer_repository
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus
        self.key_prefix = key_prefix

    async def handle(self, command: IssueLicenseCommand) -> IssuedLicenseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            IssuedLicenseDTO carrying the plaintext key

        Raises:
            DomainValidationError: If the customer does not exist or the cap is negative
        """
        if not await self.customer_repository.exists(command.customer_id):
            raise DomainValidationError(f"Customer {command.customer_id} does not exist")

        key = LicenseKeyGenerator.generate(self.key_prefix or settings.LICENSE_KEY_PREFIX)
        license = License.issue(
            customer_id=command.customer_id,
            key=key,
            max_activations=command.max_activations,
            notes=command.notes,
        )
        saved = await self.license_repository.save(license)

        await self.event_bus.publish(
            LicenseIssued(
                license_id=saved.id,
                customer_id=saved.customer_id,
                max_activations=saved.max_activations,
            )
        )
        licenses_issued_total.inc()
        logger.info(
            "License issued",
            extra={"license_id": str(saved.id), "customer_id": str(saved.customer_id)},
        )

        return IssuedLicenseDTO(license=LicenseDTO.from_entity(saved), license_key=key.value)
