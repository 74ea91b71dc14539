"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from core.domain.events import DomainEvent


class LicenseIssued(DomainEvent):
    """Event raised when a license is issued to a customer."""

    def __init__(
        self,
        license_id: uuid.UUID,
        customer_id: uuid.UUID,
        max_activations: int,
        actor: str = "operator",
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_id: License UUID
            customer_id: Owning customer UUID
            max_activations: Activation cap (0 = unlimited)
            actor: Who issued the license
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(license_id),
            event_type="LicenseIssued",
        )
        self.license_id = license_id
        self.customer_id = customer_id
        self.max_activations = max_activations
        self.actor = actor

    def payload(self):
        return {
            "customer_id": str(self.customer_id),
            "max_activations": self.max_activations,
        }


class LicenseReissued(DomainEvent):
    """Event raised when a license key is rotated."""

    def __init__(
        self,
        license_id: uuid.UUID,
        key_hint: str,
        actor: str = "operator",
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(license_id),
            event_type="LicenseReissued",
        )
        self.license_id = license_id
        self.key_hint = key_hint
        self.actor = actor

    def payload(self):
        return {"key_hint": self.key_hint}


class LicenseStatusChanged(DomainEvent):
    """Event raised when a license moves between active, suspended and revoked."""

    def __init__(
        self,
        license_id: uuid.UUID,
        previous_status: str,
        new_status: str,
        actor: str = "operator",
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(license_id),
            event_type="LicenseStatusChanged",
        )
        self.license_id = license_id
        self.previous_status = previous_status
        self.new_status = new_status
        self.actor = actor

    def payload(self):
        return {"from": self.previous_status, "to": self.new_status}


class LicenseCapacityChanged(DomainEvent):
    """Event raised when the activation cap of a license changes."""

    def __init__(
        self,
        license_id: uuid.UUID,
        previous_max: int,
        new_max: int,
        actor: str = "operator",
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(license_id),
            event_type="LicenseCapacityChanged",
        )
        self.license_id = license_id
        self.previous_max = previous_max
        self.new_max = new_max
        self.actor = actor

    def payload(self):
        return {"from": self.previous_max, "to": self.new_max}


class LicenseDeleted(DomainEvent):
    """Event raised when a license and its activations are deleted."""

    def __init__(
        self,
        license_id: uuid.UUID,
        customer_id: uuid.UUID,
        actor: str = "operator",
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(license_id),
            event_type="LicenseDeleted",
        )
        self.license_id = license_id
        self.customer_id = customer_id
        self.actor = actor

    def payload(self):
        return {"customer_id": str(self.customer_id)}
