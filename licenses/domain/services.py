"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from typing import Tuple

from core.domain.exceptions import LicenseNotFoundError
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_repository import LicenseRepository


class LicenseKeyGenerator:
    """Domain service for license key generation."""

    @staticmethod
    def generate(prefix: str) -> LicenseKey:
        """
        Generate a license key.

        Args:
            prefix: Key prefix

        Returns:
            Generated LicenseKey
        """
        return LicenseKey.generate(prefix)


class LicenseLifecycleManager:
    """Domain service for managing license lifecycle."""

    @staticmethod
    async def reissue_license(
        license: License,
        prefix: str,
        repository: LicenseRepository,
    ) -> Tuple[License, LicenseKey]:
        """
        Rotate the key of a license.

        The stored hash is replaced by a single UPDATE, so the old key stops
        matching the moment the statement commits. Activations are untouched.

        Args:
            license: License entity to reissue
            prefix: Key prefix
            repository: License repository

        Returns:
            Tuple of (saved license, new plaintext key)

        Raises:
            LicenseNotFoundError: If the license was deleted meanwhile
        """
        key = LicenseKeyGenerator.generate(prefix)
        rotated = license.reissue(key)
        saved = await repository.rotate_key(rotated.id, rotated.key_hash, rotated.key_hint)
        if saved is None:
            raise LicenseNotFoundError(f"License {license.id} not found")
        return saved, key
