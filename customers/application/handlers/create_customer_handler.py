"""
CreateCustomerHandler.

Handles the create customer command.
"""

import logging

from core.domain.events import EventBus
from core.infrastructure.events import event_bus as default_event_bus
from customers.application.commands.create_customer import CreateCustomerCommand
from customers.application.dto.customer_dto import CustomerDTO
from customers.domain.customer import Customer
from customers.domain.events import CustomerCreated
from customers.ports.customer_repository import CustomerRepository

logger = logging.getLogger(__name__)


class CreateCustomerHandler:
    """Handler for CreateCustomerCommand."""

    def __init__(self, customer_repository: CustomerRepository, event_bus: EventBus = None):
        """Initialize handler with repositories."""
        self.customer_repository = customer_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: CreateCustomerCommand) -> CustomerDTO:
        """
        Handle create customer command.

        Raises:
            DomainValidationError: If name or email is invalid
        """
        customer = Customer.create(
            name=command.name,
            email=command.email,
            company=command.company,
        )
        saved = await self.customer_repository.save(customer)

        await self.event_bus.publish(CustomerCreated(customer_id=saved.id, email=str(saved.email)))
        logger.info("Customer created", extra={"customer_id": str(saved.id)})

        return CustomerDTO.from_entity(saved)
