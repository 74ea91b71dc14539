"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.

Every write runs in one ``transaction.atomic()`` block that first takes
``SELECT ... FOR UPDATE`` on the license row. Requests against the same
license queue on that lock, so the live active count read inside the
block cannot change before the block commits. The whole block is handed
to ``sync_to_async`` as one call and never spans threads.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from activations.domain.activation import LicenseActivation
from activations.domain.services import CapacityManager
from activations.infrastructure.models import LicenseActivation as ActivationModel
from activations.ports.activation_repository import (
    ActivationClaim,
    ActivationRelease,
    ActivationRepository,
)
from core.domain.exceptions import (
    ActivationNotFoundError,
    DomainValidationError,
    LicenseNotFoundError,
)
from core.domain.value_objects import ActivationStatus, ServerAddress
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import license_to_domain

logger = logging.getLogger(__name__)


class DjangoActivationRepository(ActivationRepository):
    """
    Django ORM implementation of ActivationRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Serialises slot changes per license with a row lock
    3. Keeps ``License.activation_count`` equal to the live active count
    """

    def _to_domain(self, model: ActivationModel) -> LicenseActivation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django LicenseActivation model

        Returns:
            LicenseActivation domain entity
        """
        return LicenseActivation(
            id=model.id,
            license_id=model.license_id,
            server_ip=ServerAddress(model.server_ip),
            hostname=model.hostname,
            status=ActivationStatus(model.status),
            activated_at=model.activated_at,
            server_id=model.server_id,
            released_at=model.released_at,
        )

    # Locked helpers. Callers must already be inside transaction.atomic().

    def _lock_license(self, **lookup) -> License:
        # pylint: disable=no-member
        try:
            model = LicenseModel.objects.select_for_update().get(**lookup)
        except LicenseModel.DoesNotExist as exc:  # pylint: disable=no-member
            raise LicenseNotFoundError() from exc
        return license_to_domain(model)

    def _live_count(self, license_id: uuid.UUID) -> int:
        # pylint: disable=no-member
        return ActivationModel.objects.filter(
            license_id=license_id, status=ActivationStatus.ACTIVE.value
        ).count()

    def _store_count(self, license: License, active_count: int) -> License:
        # pylint: disable=no-member
        LicenseModel.objects.filter(id=license.id).update(activation_count=active_count)
        return license.with_activation_count(active_count)

    def _release_locked(self, model: ActivationModel, released_at: datetime) -> LicenseActivation:
        activation = self._to_domain(model).release(released_at)
        # pylint: disable=no-member
        ActivationModel.objects.filter(id=activation.id).update(
            status=activation.status.value,
            released_at=activation.released_at,
        )
        return activation

    # Atomic units

    def _claim(
        self,
        key_hash: str,
        server_ip: str,
        hostname: Optional[str],
        server_id: Optional[str],
    ) -> ActivationClaim:
        try:
            address = ServerAddress(server_ip)
        except ValueError as exc:
            raise DomainValidationError(str(exc)) from exc

        with transaction.atomic():
            license = self._lock_license(key_hash=key_hash)

            # pylint: disable=no-member
            existing_model = ActivationModel.objects.filter(
                license_id=license.id,
                server_ip=address.value,
                status=ActivationStatus.ACTIVE.value,
            ).first()
            existing = self._to_domain(existing_model) if existing_model else None
            active_count = self._live_count(license.id)

            if not CapacityManager.authorize(license, existing, active_count):
                return ActivationClaim(
                    activation=existing,
                    license=license.with_activation_count(active_count),
                    created=False,
                )

            activation = LicenseActivation.create(
                license_id=license.id,
                server_ip=address.value,
                hostname=hostname,
                server_id=server_id,
            )
            ActivationModel.objects.create(
                id=activation.id,
                license_id=activation.license_id,
                server_id=activation.server_id,
                server_ip=str(activation.server_ip),
                hostname=activation.hostname,
                status=activation.status.value,
                activated_at=activation.activated_at,
            )

            updated = license.record_activation(
                server_ip=str(activation.server_ip),
                hostname=activation.hostname,
                activated_at=activation.activated_at,
                active_count=self._live_count(license.id),
            )
            LicenseModel.objects.filter(id=license.id).update(
                activation_count=updated.activation_count,
                last_activated_at=updated.last_activated_at,
                last_activated_ip=updated.last_activated_ip,
                last_activated_hostname=updated.last_activated_hostname,
            )
            return ActivationClaim(activation=activation, license=updated, created=True)

    def _release(self, license_id: uuid.UUID, activation_id: uuid.UUID) -> ActivationRelease:
        with transaction.atomic():
            license = self._lock_license(id=license_id)
            try:
                # pylint: disable=no-member
                model = ActivationModel.objects.get(id=activation_id, license_id=license.id)
            except ActivationModel.DoesNotExist as exc:  # pylint: disable=no-member
                raise ActivationNotFoundError(
                    f"Activation {activation_id} not found for license {license_id}"
                ) from exc

            activation = self._release_locked(model, datetime.now(timezone.utc))
            license = self._store_count(license, self._live_count(license.id))
            return ActivationRelease(activation=activation, license=license)

    def _release_by_server(self, server_id: str) -> List[ActivationRelease]:
        # pylint: disable=no-member
        license_ids = list(
            ActivationModel.objects.filter(
                server_id=server_id, status=ActivationStatus.ACTIVE.value
            )
            .order_by()
            .values_list("license_id", flat=True)
            .distinct()
        )

        results = []
        for license_id in license_ids:
            with transaction.atomic():
                try:
                    license = self._lock_license(id=license_id)
                except LicenseNotFoundError:
                    # Deleted since the scan; its activations went with it.
                    continue
                models = ActivationModel.objects.filter(
                    license_id=license.id,
                    server_id=server_id,
                    status=ActivationStatus.ACTIVE.value,
                )
                released_at = datetime.now(timezone.utc)
                released = [
                    self._release_locked(model, released_at) for model in models
                ]
                license = self._store_count(license, self._live_count(license.id))
                results.extend(
                    ActivationRelease(activation=activation, license=license)
                    for activation in released
                )
        return results

    def _reconcile(self, dry_run: bool) -> int:
        # pylint: disable=no-member
        drifted = 0
        for license_id in LicenseModel.objects.values_list("id", flat=True):
            with transaction.atomic():
                try:
                    license = self._lock_license(id=license_id)
                except LicenseNotFoundError:
                    continue
                live = self._live_count(license.id)
                if live == license.activation_count:
                    continue
                drifted += 1
                logger.warning(
                    "Activation count drift",
                    extra={
                        "license_id": str(license.id),
                        "cached": license.activation_count,
                        "live": live,
                        "dry_run": dry_run,
                    },
                )
                if not dry_run:
                    self._store_count(license, live)
        return drifted

    async def find_all_by_license(self, license_id: uuid.UUID) -> List[LicenseActivation]:
        """
        Find all activations for a license, most recent first.

        Args:
            license_id: License UUID

        Returns:
            List of LicenseActivation entities
        """
        # pylint: disable=no-member
        qs = ActivationModel.objects.filter(license_id=license_id).order_by("-activated_at")
        models = await sync_to_async(list)(qs)
        return [self._to_domain(model) for model in models]

    async def claim(
        self,
        key_hash: str,
        server_ip: str,
        hostname: Optional[str] = None,
        server_id: Optional[str] = None,
    ) -> ActivationClaim:
        """
        Activate the license matching ``key_hash`` for a machine.

        Returns:
            ActivationClaim with the new or reused activation
        """
        return await sync_to_async(self._claim)(key_hash, server_ip, hostname, server_id)

    async def release(
        self, license_id: uuid.UUID, activation_id: uuid.UUID
    ) -> ActivationRelease:
        """
        Release one activation of a license.

        Returns:
            ActivationRelease with the released activation
        """
        return await sync_to_async(self._release)(license_id, activation_id)

    async def release_by_server(self, server_id: str) -> List[ActivationRelease]:
        """
        Release every active activation tagged with ``server_id``.

        Each affected license is locked on its own, one after the other.
        """
        return await sync_to_async(self._release_by_server)(server_id)

    async def reconcile_counts(self, dry_run: bool = False) -> int:
        """
        Recompute every cached activation count from the live rows.

        Returns:
            Number of licenses whose cached count was wrong
        """
        return await sync_to_async(self._reconcile)(dry_run)
