"""
Customer repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from customers.domain.customer import Customer


class CustomerRepository(ABC):
    """Abstract repository for Customer entities."""

    @abstractmethod
    async def save(self, customer: Customer) -> Customer:
        """
        Save a customer entity.

        Args:
            customer: Customer entity to save

        Returns:
            Saved customer entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, customer_id: uuid.UUID) -> Optional[Customer]:
        """
        Find a customer by ID.

        Args:
            customer_id: Customer UUID

        Returns:
            Customer entity or None if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Customer]:
        """List all customers, newest first."""
        pass

    @abstractmethod
    async def exists(self, customer_id: uuid.UUID) -> bool:
        """Check if a customer exists."""
        pass
