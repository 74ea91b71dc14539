"""
Activation repository port (interface).

This defines the contract for activation persistence operations.
Implementations are in the infrastructure layer.

Every operation that changes how many slots of a license are taken
(claim, release, reconciliation) runs as one atomic
unit holding a lock on the license row, so the capacity check and the
write it guards cannot interleave with another request.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional
import uuid

from activations.domain.activation import LicenseActivation
from licenses.domain.license import License


@dataclass(frozen=True)
class ActivationClaim:
    """Outcome of an activation request."""

    activation: LicenseActivation
    license: License
    created: bool


@dataclass(frozen=True)
class ActivationRelease:
    """Outcome of releasing an activation."""

    activation: LicenseActivation
    license: License


class ActivationRepository(ABC):
    """
    Abstract repository for LicenseActivation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_all_by_license(self, license_id: uuid.UUID) -> List[LicenseActivation]:
        """
        Find all activations for a license, most recent first.

        Args:
            license_id: License UUID

        Returns:
            List of LicenseActivation entities
        """
        pass

    @abstractmethod
    async def claim(
        self,
        key_hash: str,
        server_ip: str,
        hostname: Optional[str] = None,
        server_id: Optional[str] = None,
    ) -> ActivationClaim:
        """
        Activate the license matching ``key_hash`` for a machine.

        Args:
            key_hash: Hash of the presented license key
            server_ip: IP address of the machine
            hostname: Hostname of the machine
            server_id: Optional external server reference

        Returns:
            ActivationClaim with the new or reused activation

        Raises:
            LicenseNotFoundError: If no license has this key
            LicenseNotActiveError: If the license is suspended or revoked
            ActivationLimitExceededError: If no slot is free
        """
        pass

    @abstractmethod
    async def release(
        self, license_id: uuid.UUID, activation_id: uuid.UUID
    ) -> ActivationRelease:
        """
        Release one activation of a license.

        Raises:
            LicenseNotFoundError: If the license does not exist
            ActivationNotFoundError: If the activation is foreign or already released
        """
        pass

    @abstractmethod
    async def release_by_server(self, server_id: str) -> List[ActivationRelease]:
        """
        Release every active activation tagged with ``server_id``.

        Args:
            server_id: External server reference

        Returns:
            One ActivationRelease per released activation
        """
        pass

    @abstractmethod
    async def reconcile_counts(self, dry_run: bool = False) -> int:
        """
        Recompute every cached activation count from the live rows.

        Args:
            dry_run: Only report drifted licenses

        Returns:
            Number of licenses whose cached count was wrong
        """
        pass
