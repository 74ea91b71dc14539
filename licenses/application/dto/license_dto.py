"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information. The key itself is never part of it."""

    id: uuid.UUID
    customer_id: uuid.UUID
    key_hint: str
    status: str
    max_activations: int
    activation_count: int
    remaining_activations: Optional[int]
    notes: str
    last_activated_at: Optional[datetime]
    last_activated_ip: Optional[str]
    last_activated_hostname: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        """Build the DTO from a License entity."""
        return cls(
            id=license.id,
            customer_id=license.customer_id,
            key_hint=license.key_hint,
            status=license.status.value,
            max_activations=license.max_activations,
            activation_count=license.activation_count,
            remaining_activations=license.remaining_slots(license.activation_count),
            notes=license.notes,
            last_activated_at=license.last_activated_at,
            last_activated_ip=license.last_activated_ip,
            last_activated_hostname=license.last_activated_hostname,
            created_at=license.created_at,
            updated_at=license.updated_at,
        )


@dataclass
class IssuedLicenseDTO:
    """
    DTO returned by issue and reissue.

    This is the only place the plaintext key ever appears.
    """

    license: LicenseDTO
    license_key: str
