"""
Django implementation of CustomerRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from core.domain.value_objects import Email
from customers.domain.customer import Customer
from customers.infrastructure.models import Customer as CustomerModel
from customers.ports.customer_repository import CustomerRepository


class DjangoCustomerRepository(CustomerRepository):
    """Django ORM implementation of CustomerRepository."""

    def _to_domain(self, model: CustomerModel) -> Customer:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Customer model

        Returns:
            Customer domain entity
        """
        return Customer(
            id=model.id,
            name=model.name,
            email=Email(model.email),
            company=model.company,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def save(self, customer: Customer) -> Customer:
        """
        Save a customer entity.

        Args:
            customer: Customer entity to save

        Returns:
            Saved customer entity
        """
        # pylint: disable=no-member
        model, _ = await sync_to_async(CustomerModel.objects.update_or_create)(
            id=customer.id,
            defaults={
                "name": customer.name,
                "email": str(customer.email),
                "company": customer.company,
            },
        )
        return self._to_domain(model)

    async def find_by_id(self, customer_id: uuid.UUID) -> Optional[Customer]:
        """
        Find a customer by ID.

        Args:
            customer_id: Customer UUID

        Returns:
            Customer entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = await sync_to_async(CustomerModel.objects.get)(id=customer_id)
            return self._to_domain(model)
        except CustomerModel.DoesNotExist:  # pylint: disable=no-member
            return None

    async def list_all(self) -> List[Customer]:
        """
        List all customers.

        Returns:
            List of Customer entities
        """
        # pylint: disable=no-member
        qs = CustomerModel.objects.all()
        models = await sync_to_async(list)(qs)
        return [self._to_domain(model) for model in models]

    async def exists(self, customer_id: uuid.UUID) -> bool:
        """
        Check if a customer exists.

        Args:
            customer_id: Customer UUID

        Returns:
            True if customer exists, False otherwise
        """
        # pylint: disable=no-member
        qs = CustomerModel.objects.filter(id=customer_id)
        return await sync_to_async(qs.exists)()
