"""
LicenseActivation domain entity.

This is the core domain entity representing one machine holding an
activation slot of a license. It contains business logic and is
independent of infrastructure.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.exceptions import ActivationAlreadyReleasedError, DomainValidationError
from core.domain.value_objects import ActivationStatus, ServerAddress

UNKNOWN_HOSTNAME = "unknown"


@dataclass(frozen=True)
class LicenseActivation:
    """
    LicenseActivation domain entity.

    Lifecycle: ``active -> released``. Released is terminal and a
    released activation always carries ``released_at >= activated_at``.
    """

    id: uuid.UUID
    license_id: uuid.UUID
    server_ip: ServerAddress
    hostname: str
    status: ActivationStatus
    activated_at: datetime
    server_id: Optional[str] = None
    released_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate activation entity."""
        if not self.license_id:
            raise DomainValidationError("License ID is required")
        if len(self.hostname) > 255:
            raise DomainValidationError("Hostname too long")
        if self.status is ActivationStatus.RELEASED:
            if self.released_at is None or self.released_at < self.activated_at:
                raise DomainValidationError("Released activation needs a release time")
        elif self.released_at is not None:
            raise DomainValidationError("Active activation cannot have a release time")

    @classmethod
    def create(
        cls,
        license_id: uuid.UUID,
        server_ip: str,
        hostname: Optional[str] = None,
        server_id: Optional[str] = None,
        activation_id: Optional[uuid.UUID] = None,
    ) -> "LicenseActivation":
        """
        Create a new active LicenseActivation entity.

        Args:
            license_id: License UUID
            server_ip: IP address of the activating machine
            hostname: Reported hostname ("unknown" when missing)
            server_id: Optional reference to an external server record
            activation_id: Optional UUID (generated if not provided)

        Returns:
            LicenseActivation entity instance
        """
        try:
            address = ServerAddress(server_ip)
        except ValueError as exc:
            raise DomainValidationError(str(exc)) from exc
        return cls(
            id=activation_id or uuid.uuid4(),
            license_id=license_id,
            server_ip=address,
            hostname=(hostname or "").strip() or UNKNOWN_HOSTNAME,
            status=ActivationStatus.ACTIVE,
            activated_at=datetime.now(timezone.utc),
            server_id=server_id or None,
        )

    @property
    def is_active(self) -> bool:
        """True while the activation holds a slot."""
        return self.status is ActivationStatus.ACTIVE

    def release(self, released_at: Optional[datetime] = None) -> "LicenseActivation":
        """
        Create a new LicenseActivation instance with released status.

        Raises:
            ActivationAlreadyReleasedError: If the activation no longer holds a slot
        """
        if not self.is_active:
            raise ActivationAlreadyReleasedError(f"Activation {self.id} is already released")

        when = released_at or datetime.now(timezone.utc)
        return replace(
            self,
            status=ActivationStatus.RELEASED,
            released_at=max(when, self.activated_at),
        )
