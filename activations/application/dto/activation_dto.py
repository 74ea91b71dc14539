"""
Activation DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from activations.domain.activation import LicenseActivation


@dataclass
class ActivationDTO:
    """DTO for activation information."""

    id: uuid.UUID
    license_id: uuid.UUID
    server_id: Optional[str]
    server_ip: str
    hostname: str
    status: str
    activated_at: datetime
    released_at: Optional[datetime]

    @classmethod
    def from_entity(cls, activation: LicenseActivation) -> "ActivationDTO":
        """Build the DTO from a LicenseActivation entity."""
        return cls(
            id=activation.id,
            license_id=activation.license_id,
            server_id=activation.server_id,
            server_ip=str(activation.server_ip),
            hostname=activation.hostname,
            status=activation.status.value,
            activated_at=activation.activated_at,
            released_at=activation.released_at,
        )


@dataclass
class ActivateLicenseResponseDTO:
    """
    DTO for the activate response.

    ``created`` is False when the machine already held an active slot.
    ``remaining_activations`` is None for unlimited licenses.
    """

    activation: ActivationDTO
    created: bool
    max_activations: int
    active_activations: int
    remaining_activations: Optional[int]
