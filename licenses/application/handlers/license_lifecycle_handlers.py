"""
License lifecycle handlers.

Handlers for reissue, update and delete license commands.
"""
import logging
import uuid

from django.conf import settings

from core.domain.events import EventBus
from core.domain.exceptions import DomainValidationError, LicenseNotFoundError
from core.domain.value_objects import LicenseStatus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import license_status_changes_total, licenses_reissued_total
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.reissue_license import ReissueLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.dto.license_dto import IssuedLicenseDTO, LicenseDTO
from licenses.domain.events import (
    LicenseCapacityChanged,
    LicenseDeleted,
    LicenseReissued,
    LicenseStatusChanged,
)
from licenses.domain.license import License
from licenses.domain.services import LicenseLifecycleManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


def parse_status(value: str) -> LicenseStatus:
    """
    Map a wire status onto LicenseStatus.

    Raises:
        DomainValidationError: If the status is unknown
    """
    try:
        return LicenseStatus(value)
    except ValueError as exc:
        allowed = ", ".join(status.value for status in LicenseStatus)
        raise DomainValidationError(f"Invalid status '{value}', expected one of: {allowed}") from exc


async def _get_or_raise(repository: LicenseRepository, license_id: uuid.UUID) -> License:
    license = await repository.find_by_id(license_id)
    if not license:
        raise LicenseNotFoundError(f"License {license_id} not found")
    return license


class ReissueLicenseHandler:
    """Handler for ReissueLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        event_bus: EventBus = None,
        key_prefix: str = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus
        self.key_prefix = key_prefix

    async def handle(self, command: ReissueLicenseCommand) -> IssuedLicenseDTO:
        """
        Handle reissue license command.

        Args:
            command: ReissueLicenseCommand

        Returns:
            IssuedLicenseDTO with the new plaintext key

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await _get_or_raise(self.license_repository, command.license_id)

        reissued, key = await LicenseLifecycleManager.reissue_license(
            license,
            self.key_prefix or settings.LICENSE_KEY_PREFIX,
            self.license_repository,
        )

        await self.event_bus.publish(
            LicenseReissued(license_id=reissued.id, key_hint=reissued.key_hint)
        )
        licenses_reissued_total.inc()
        logger.info("License key reissued", extra={"license_id": str(reissued.id)})

        return IssuedLicenseDTO(license=LicenseDTO.from_entity(reissued), license_key=key.value)


class UpdateLicenseHandler:
    """Handler for UpdateLicenseCommand (partial update)."""

    def __init__(self, license_repository: LicenseRepository, event_bus: EventBus = None):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: UpdateLicenseCommand) -> LicenseDTO:
        """
        Handle update license command.

        Status, notes and cap are written in one locked unit, so a rejected
        field leaves the others untouched and a concurrent status change is
        never overwritten with an older one.

        Suspending or revoking keeps existing activations; only new
        activations are refused while the license is not active.

        Raises:
            LicenseNotFoundError: If license not found
            DomainValidationError: If a field is invalid or the new cap is
                below the number of active activations
            InvalidStatusTransitionError: If the license is revoked
        """
        status = parse_status(command.status) if command.status is not None else None
        before, after = await self.license_repository.update(
            command.license_id,
            status=status,
            notes=command.notes,
            max_activations=command.max_activations,
        )

        if after.max_activations != before.max_activations:
            await self.event_bus.publish(
                LicenseCapacityChanged(
                    license_id=after.id,
                    previous_max=before.max_activations,
                    new_max=after.max_activations,
                )
            )
            logger.info(
                "License capacity changed",
                extra={
                    "license_id": str(after.id),
                    "from": before.max_activations,
                    "to": after.max_activations,
                },
            )

        if after.status != before.status:
            await self.event_bus.publish(
                LicenseStatusChanged(
                    license_id=after.id,
                    previous_status=before.status.value,
                    new_status=after.status.value,
                )
            )
            license_status_changes_total.labels(status=after.status.value).inc()
            logger.info(
                "License status changed",
                extra={
                    "license_id": str(after.id),
                    "from": before.status.value,
                    "to": after.status.value,
                },
            )

        return LicenseDTO.from_entity(after)


class DeleteLicenseHandler:
    """Handler for DeleteLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, event_bus: EventBus = None):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: DeleteLicenseCommand) -> None:
        """
        Handle delete license command.

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await _get_or_raise(self.license_repository, command.license_id)
        if not await self.license_repository.delete(license.id):
            raise LicenseNotFoundError(f"License {command.license_id} not found")

        await self.event_bus.publish(
            LicenseDeleted(license_id=license.id, customer_id=license.customer_id)
        )
        logger.info("License deleted", extra={"license_id": str(license.id)})
