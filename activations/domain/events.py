"""
Activation domain events.

Domain events represent something that happened in the activation domain.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional

from core.domain.events import DomainEvent


class LicenseActivated(DomainEvent):
    """Event raised when a machine takes an activation slot."""

    entity_type = "license_activation"

    def __init__(
        self,
        activation_id: uuid.UUID,
        license_id: uuid.UUID,
        server_ip: str,
        hostname: str,
        server_id: Optional[str] = None,
        actor: str = "client",
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseActivated event.

        Args:
            activation_id: Activation UUID
            license_id: License UUID
            server_ip: IP address of the activating machine
            hostname: Hostname reported by the machine
            server_id: Optional external server reference
            actor: Who triggered the activation
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(activation_id),
            event_type="LicenseActivated",
        )
        self.activation_id = activation_id
        self.license_id = license_id
        self.server_ip = server_ip
        self.hostname = hostname
        self.server_id = server_id
        self.actor = actor

    def payload(self):
        return {
            "license_id": str(self.license_id),
            "server_ip": self.server_ip,
            "hostname": self.hostname,
            "server_id": self.server_id,
        }


class ActivationReleased(DomainEvent):
    """Event raised when an activation gives its slot back."""

    entity_type = "license_activation"

    def __init__(
        self,
        activation_id: uuid.UUID,
        license_id: uuid.UUID,
        server_ip: str,
        actor: str = "operator",
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize ActivationReleased event.

        Args:
            activation_id: Activation UUID
            license_id: License UUID
            server_ip: IP address of the released machine
            actor: Who released the activation
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(activation_id),
            event_type="ActivationReleased",
        )
        self.activation_id = activation_id
        self.license_id = license_id
        self.server_ip = server_ip
        self.actor = actor

    def payload(self):
        return {"license_id": str(self.license_id), "server_ip": self.server_ip}
