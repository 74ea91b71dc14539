"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
import uuid

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.

    ``save`` only inserts newly issued licenses. Operator edits go through
    ``update``, which locks the row and decides against its current state;
    the key changes through ``rotate_key``.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Insert a newly issued license.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        pass

    @abstractmethod
    async def update(
        self,
        license_id: uuid.UUID,
        status: Optional[LicenseStatus] = None,
        notes: Optional[str] = None,
        max_activations: Optional[int] = None,
    ) -> Tuple[License, License]:
        """
        Apply an operator edit to a license as one atomic unit.

        The row is locked and re-read first, so the status transition and
        the cap check are decided against its current state. Either every
        requested change is written or none is.

        Args:
            license_id: License UUID
            status: New status, None to keep it
            notes: New notes, None to keep them
            max_activations: New cap (0 = unlimited), None to keep it

        Returns:
            Tuple of (license before the edit, license after the edit)

        Raises:
            LicenseNotFoundError: If the license does not exist
            InvalidStatusTransitionError: If the transition is not allowed
            DomainValidationError: If the cap is below the active count
        """
        pass

    @abstractmethod
    async def rotate_key(
        self, license_id: uuid.UUID, key_hash: str, key_hint: str
    ) -> Optional[License]:
        """
        Replace the key of a license in a single UPDATE.

        The old key stops matching as soon as the statement commits.

        Args:
            license_id: License UUID
            key_hash: Hash of the new key
            key_hint: Last characters of the new key

        Returns:
            Updated License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_all(self, customer_id: Optional[uuid.UUID] = None) -> List[License]:
        """
        List licenses, newest first.

        Args:
            customer_id: Only return licenses of this customer

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def delete(self, license_id: uuid.UUID) -> bool:
        """
        Delete a license and, by cascade, its activations.

        Args:
            license_id: License UUID

        Returns:
            True if a license was deleted
        """
        pass

    @abstractmethod
    async def exists(self, license_id: uuid.UUID) -> bool:
        """
        Check if a license exists.

        Args:
            license_id: License UUID

        Returns:
            True if license exists, False otherwise
        """
        pass
