"""
ListActivationsHandler.
"""

from typing import List

from activations.application.dto.activation_dto import ActivationDTO
from activations.application.queries.list_activations import ListActivationsQuery
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import LicenseNotFoundError
from licenses.ports.license_repository import LicenseRepository


class ListActivationsHandler:
    """Handler for ListActivationsQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, query: ListActivationsQuery) -> List[ActivationDTO]:
        """
        Handle list activations query.

        Returns:
            Activations of the license, active and released, newest first

        Raises:
            LicenseNotFoundError: If license not found
        """
        if not await self.license_repository.exists(query.license_id):
            raise LicenseNotFoundError(f"License {query.license_id} not found")
        activations = await self.activation_repository.find_all_by_license(query.license_id)
        return [ActivationDTO.from_entity(activation) for activation in activations]
