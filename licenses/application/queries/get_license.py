"""
License queries.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class GetLicenseQuery:
    """Query to fetch one license."""

    license_id: uuid.UUID


@dataclass
class ListLicensesQuery:
    """Query to list licenses, optionally for one customer."""

    customer_id: Optional[uuid.UUID] = None
