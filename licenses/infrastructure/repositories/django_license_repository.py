"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.

Operator edits of an existing license re-read the row under
``SELECT ... FOR UPDATE`` and decide against that fresh copy, the same
lock the activation repository takes before touching slots.
"""
import uuid
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import transaction
from django.utils import timezone

from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import ActivationStatus, LicenseStatus
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


def license_to_domain(model: LicenseModel) -> License:
    """
    Convert Django model to domain entity.

    Shared with the activation repository, which loads licenses under lock.

    Args:
        model: Django License model

    Returns:
        License domain entity
    """
    return License(
        id=model.id,
        customer_id=model.customer_id,
        key_hash=model.key_hash,
        key_hint=model.key_hint,
        status=LicenseStatus(model.status),
        max_activations=model.max_activations,
        activation_count=model.activation_count,
        notes=model.notes or "",
        created_at=model.created_at,
        updated_at=model.updated_at,
        last_activated_at=model.last_activated_at,
        last_activated_ip=model.last_activated_ip,
        last_activated_hostname=model.last_activated_hostname,
    )


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Applies operator edits to a locked, freshly read row
    3. Implements repository interface
    """

    # Columns an operator edit may touch, keyed by entity attribute.
    EDITABLE_FIELDS = ("status", "notes", "max_activations", "activation_count", "updated_at")

    def _to_domain(self, model: LicenseModel) -> License:
        return license_to_domain(model)

    def _save(self, license: License) -> License:
        # pylint: disable=no-member
        model = LicenseModel.objects.create(
            id=license.id,
            customer_id=license.customer_id,
            key_hash=license.key_hash,
            key_hint=license.key_hint,
            status=license.status.value,
            max_activations=license.max_activations,
            activation_count=license.activation_count,
            notes=license.notes,
            created_at=license.created_at,
            updated_at=license.updated_at,
        )
        return self._to_domain(model)

    async def save(self, license: License) -> License:
        """
        Insert a newly issued license.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        return await sync_to_async(self._save)(license)

    def _update(
        self,
        license_id: uuid.UUID,
        status: Optional[LicenseStatus],
        notes: Optional[str],
        max_activations: Optional[int],
    ) -> Tuple[License, License]:
        with transaction.atomic():
            try:
                # pylint: disable=no-member
                model = LicenseModel.objects.select_for_update().get(id=license_id)
            except LicenseModel.DoesNotExist as exc:  # pylint: disable=no-member
                raise LicenseNotFoundError(f"License {license_id} not found") from exc

            before = self._to_domain(model)
            after = before
            if status is not None:
                after = after.change_status(status)
            if notes is not None and notes != after.notes:
                after = after.update_notes(notes)
            if max_activations is not None and max_activations != after.max_activations:
                active_count = model.activations.filter(
                    status=ActivationStatus.ACTIVE.value
                ).count()
                after = after.change_capacity(max_activations, active_count)

            changed = {
                field: getattr(after, field)
                for field in self.EDITABLE_FIELDS
                if getattr(after, field) != getattr(before, field)
            }
            if not changed:
                return before, before
            if "status" in changed:
                changed["status"] = after.status.value
            # pylint: disable=no-member
            LicenseModel.objects.filter(id=license_id).update(**changed)
            return before, after

    async def update(
        self,
        license_id: uuid.UUID,
        status: Optional[LicenseStatus] = None,
        notes: Optional[str] = None,
        max_activations: Optional[int] = None,
    ) -> Tuple[License, License]:
        """
        Apply an operator edit to a license as one locked unit.

        Returns:
            Tuple of (license before the edit, license after the edit)
        """
        return await sync_to_async(self._update)(license_id, status, notes, max_activations)

    def _rotate_key(self, license_id: uuid.UUID, key_hash: str, key_hint: str) -> Optional[License]:
        # pylint: disable=no-member
        updated = LicenseModel.objects.filter(id=license_id).update(
            key_hash=key_hash,
            key_hint=key_hint,
            updated_at=timezone.now(),
        )
        if not updated:
            return None
        return self._to_domain(LicenseModel.objects.get(id=license_id))

    async def rotate_key(
        self, license_id: uuid.UUID, key_hash: str, key_hint: str
    ) -> Optional[License]:
        """
        Replace the key of a license in a single UPDATE.

        Returns:
            Updated License entity or None if not found
        """
        return await sync_to_async(self._rotate_key)(license_id, key_hash, key_hint)

    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = await sync_to_async(LicenseModel.objects.get)(id=license_id)
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:  # pylint: disable=no-member
            return None

    async def find_all(self, customer_id: Optional[uuid.UUID] = None) -> List[License]:
        """
        List licenses, newest first.

        Args:
            customer_id: Only return licenses of this customer

        Returns:
            List of License entities
        """
        # pylint: disable=no-member
        qs = LicenseModel.objects.all()
        if customer_id is not None:
            qs = qs.filter(customer_id=customer_id)
        models = await sync_to_async(list)(qs.order_by("-created_at"))
        return [self._to_domain(model) for model in models]

    async def delete(self, license_id: uuid.UUID) -> bool:
        """
        Delete a license; its activations go with it.

        Args:
            license_id: License UUID

        Returns:
            True if a license was deleted
        """
        # pylint: disable=no-member
        qs = LicenseModel.objects.filter(id=license_id)
        deleted, _ = await sync_to_async(qs.delete)()
        return deleted > 0

    async def exists(self, license_id: uuid.UUID) -> bool:
        """
        Check if a license exists.

        Args:
            license_id: License UUID

        Returns:
            True if license exists, False otherwise
        """
        # pylint: disable=no-member
        qs = LicenseModel.objects.filter(id=license_id)
        return await sync_to_async(qs.exists)()
