"""
Customer queries.
"""
import uuid
from dataclasses import dataclass


@dataclass
class GetCustomerQuery:
    """Query to fetch one customer."""

    customer_id: uuid.UUID


@dataclass
class ListCustomersQuery:
    """Query to list every customer."""
