"""
Handlers for customer queries.
"""

from typing import List

from core.domain.exceptions import CustomerNotFoundError
from customers.application.dto.customer_dto import CustomerDTO
from customers.application.queries.get_customer import GetCustomerQuery, ListCustomersQuery
from customers.ports.customer_repository import CustomerRepository


class GetCustomerHandler:
    """Handler for GetCustomerQuery."""

    def __init__(self, customer_repository: CustomerRepository):
        self.customer_repository = customer_repository

    async def handle(self, query: GetCustomerQuery) -> CustomerDTO:
        """
        Handle get customer query.

        Raises:
            CustomerNotFoundError: If the customer does not exist
        """
        customer = await self.customer_repository.find_by_id(query.customer_id)
        if not customer:
            raise CustomerNotFoundError(f"Customer {query.customer_id} not found")
        return CustomerDTO.from_entity(customer)


class ListCustomersHandler:
    """Handler for ListCustomersQuery."""

    def __init__(self, customer_repository: CustomerRepository):
        self.customer_repository = customer_repository

    async def handle(self, query: ListCustomersQuery) -> List[CustomerDTO]:
        customers = await self.customer_repository.list_all()
        return [CustomerDTO.from_entity(customer) for customer in customers]
