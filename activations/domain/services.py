"""
Activation domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

from typing import Optional

from activations.domain.activation import LicenseActivation
from core.domain.exceptions import ActivationLimitExceededError
from licenses.domain.license import License


class CapacityManager:
    """Domain service deciding whether a machine may take a license slot."""

    @staticmethod
    def ensure_slot_available(license: License, active_count: int) -> None:
        """
        Check the activation cap against the live active count.

        Raises:
            ActivationLimitExceededError: If every slot is taken
        """
        if not license.has_capacity(active_count):
            raise ActivationLimitExceededError(
                f"License allows {license.max_activations} active activation(s) "
                f"and {active_count} are in use"
            )

    @staticmethod
    def authorize(
        license: License,
        existing: Optional[LicenseActivation],
        active_count: int,
    ) -> bool:
        """
        Decide the outcome of an activation request.

        Checks run in this order: license status, reuse of an activation
        already held by the same server IP, then capacity. Reuse comes
        before capacity so a retrying script never trips the cap with its
        own slot.

        Args:
            license: License locked for the duration of the decision
            existing: Active activation for the same server IP, if any
            active_count: Live number of active activations

        Returns:
            True if a new activation must be created, False if ``existing``
            is returned as is

        Raises:
            LicenseNotActiveError: If the license is suspended or revoked
            ActivationLimitExceededError: If no slot is free
        """
        license.ensure_usable()
        if existing is not None and existing.is_active:
            return False
        CapacityManager.ensure_slot_available(license, active_count)
        return True
