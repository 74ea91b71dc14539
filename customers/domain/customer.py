"""
Customer domain entity.

A customer owns licenses. Only the fields the licensing flow needs are
kept here.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.domain.exceptions import DomainValidationError
from core.domain.value_objects import Email


@dataclass(frozen=True)
class Customer:
    """
    Customer domain entity.

    This is an immutable value object with business logic.
    """

    id: uuid.UUID
    name: str
    email: Email
    created_at: datetime
    updated_at: datetime
    company: Optional[str] = None

    def __post_init__(self):
        """Validate customer entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise DomainValidationError("Customer name cannot be empty")
        if len(self.name) > 255:
            raise DomainValidationError("Customer name too long")

    @classmethod
    def create(
        cls,
        name: str,
        email: str,
        company: Optional[str] = None,
        customer_id: Optional[uuid.UUID] = None,
    ) -> "Customer":
        """
        Create a new Customer entity.

        Args:
            name: Customer display name
            email: Contact email
            company: Optional company name
            customer_id: Optional UUID (generated if not provided)

        Returns:
            Customer entity instance
        """
        try:
            address = Email(email.strip().lower())
        except ValueError as exc:
            raise DomainValidationError(str(exc)) from exc
        now = datetime.now(timezone.utc)
        return cls(
            id=customer_id or uuid.uuid4(),
            name=(name or "").strip(),
            email=address,
            company=(company or "").strip() or None,
            created_at=now,
            updated_at=now,
        )
