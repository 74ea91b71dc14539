"""
License domain entity.

This is the core domain entity representing a license issued to a
customer. It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.exceptions import (
    DomainValidationError,
    InvalidStatusTransitionError,
    LicenseNotActiveError,
)
from core.domain.value_objects import LicenseStatus
from licenses.domain.license_key import LicenseKey


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Authorizes a customer's scripts to run on up to ``max_activations``
    machines at the same time (0 = unlimited). ``activation_count`` is a
    cache of the live number of active activations and is only ever
    written together with the activation rows it mirrors.
    """

    id: uuid.UUID
    customer_id: uuid.UUID
    key_hash: str
    key_hint: str
    status: LicenseStatus
    max_activations: int
    activation_count: int
    notes: str
    created_at: datetime
    updated_at: datetime
    last_activated_at: Optional[datetime] = None
    last_activated_ip: Optional[str] = None
    last_activated_hostname: Optional[str] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.customer_id:
            raise DomainValidationError("Customer ID is required")
        if not self.key_hash or len(self.key_hash) != 64:
            raise DomainValidationError("Invalid license key hash")
        if self.max_activations is None or self.max_activations < 0:
            raise DomainValidationError("maxActivations must be zero (unlimited) or positive")
        if self.activation_count < 0:
            raise DomainValidationError("Activation count cannot be negative")

    @classmethod
    def issue(
        cls,
        customer_id: uuid.UUID,
        key: LicenseKey,
        max_activations: int = 0,
        notes: str = "",
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new active License entity.

        Args:
            customer_id: Owning customer UUID
            key: Freshly generated license key
            max_activations: Activation cap, 0 for unlimited
            notes: Optional internal notes
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=license_id or uuid.uuid4(),
            customer_id=customer_id,
            key_hash=key.key_hash,
            key_hint=key.hint,
            status=LicenseStatus.ACTIVE,
            max_activations=max_activations,
            activation_count=0,
            notes=notes or "",
            created_at=now,
            updated_at=now,
        )

    @property
    def is_usable(self) -> bool:
        """True when the license accepts new activations."""
        return self.status.is_usable

    @property
    def is_unlimited(self) -> bool:
        """True when the license has no activation cap."""
        return self.max_activations == 0

    def ensure_usable(self) -> None:
        """
        Reject activation attempts against suspended or revoked licenses.

        Raises:
            LicenseNotActiveError: If status is not active
        """
        if not self.is_usable:
            raise LicenseNotActiveError(f"License is {self.status.value}")

    def has_capacity(self, active_count: int) -> bool:
        """
        Check if one more activation fits under the cap.

        Args:
            active_count: Live number of active activations

        Returns:
            True if another activation is allowed
        """
        return self.is_unlimited or active_count < self.max_activations

    def remaining_slots(self, active_count: int) -> Optional[int]:
        """Free activation slots, or None when unlimited."""
        if self.is_unlimited:
            return None
        return max(0, self.max_activations - active_count)

    def reissue(self, key: LicenseKey) -> "License":
        """
        Create a new License instance bound to a rotated key.

        Existing activations are not affected; only the credential changes.
        """
        return replace(
            self,
            key_hash=key.key_hash,
            key_hint=key.hint,
            updated_at=datetime.now(timezone.utc),
        )

    def change_status(self, new_status: LicenseStatus) -> "License":
        """
        Create a new License instance with the given status.

        Raises:
            InvalidStatusTransitionError: If leaving the revoked state
        """
        if new_status == self.status:
            return self
        if not self.status.can_transition_to(new_status):
            raise InvalidStatusTransitionError(
                f"Cannot change license status from {self.status.value} to {new_status.value}"
            )
        return replace(self, status=new_status, updated_at=datetime.now(timezone.utc))

    def change_capacity(self, new_max: int, active_count: int) -> "License":
        """
        Create a new License instance with a different activation cap.

        The cap may not drop below the machines already holding a slot,
        otherwise the license would be over capacity.

        Args:
            new_max: New activation cap, 0 for unlimited
            active_count: Live number of active activations

        Raises:
            DomainValidationError: If the new cap is negative or too low
        """
        if new_max < 0:
            raise DomainValidationError("maxActivations must be zero (unlimited) or positive")
        if new_max != 0 and new_max < active_count:
            raise DomainValidationError(
                f"maxActivations cannot be lower than the {active_count} active activation(s); "
                "release activations first"
            )
        return replace(
            self,
            max_activations=new_max,
            activation_count=active_count,
            updated_at=datetime.now(timezone.utc),
        )

    def update_notes(self, notes: str) -> "License":
        """Create a new License instance with updated notes."""
        return replace(self, notes=notes or "", updated_at=datetime.now(timezone.utc))

    def record_activation(
        self,
        server_ip: str,
        hostname: str,
        activated_at: datetime,
        active_count: int,
    ) -> "License":
        """
        Create a new License instance reflecting a successful activation.

        Args:
            server_ip: IP of the machine that activated
            hostname: Hostname of the machine that activated
            activated_at: Activation timestamp
            active_count: Live number of active activations after the insert
        """
        return replace(
            self,
            activation_count=active_count,
            last_activated_at=activated_at,
            last_activated_ip=server_ip,
            last_activated_hostname=hostname,
        )

    def with_activation_count(self, active_count: int) -> "License":
        """Create a new License instance with a recomputed activation count."""
        return replace(self, activation_count=active_count)
