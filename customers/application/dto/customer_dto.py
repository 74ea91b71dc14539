"""
Customer DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from customers.domain.customer import Customer


@dataclass
class CustomerDTO:
    """DTO for customer information."""

    id: uuid.UUID
    name: str
    email: str
    company: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerDTO":
        """Build the DTO from a Customer entity."""
        return cls(
            id=customer.id,
            name=customer.name,
            email=str(customer.email),
            company=customer.company,
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )
