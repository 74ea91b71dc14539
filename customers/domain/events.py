"""
Customer domain events.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from core.domain.events import DomainEvent


class CustomerCreated(DomainEvent):
    """Event raised when a customer record is created."""

    entity_type = "customer"

    def __init__(
        self,
        customer_id: uuid.UUID,
        email: str,
        actor: str = "operator",
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=str(customer_id),
            event_type="CustomerCreated",
        )
        self.customer_id = customer_id
        self.email = email
        self.actor = actor

    def payload(self):
        return {"email": self.email}
