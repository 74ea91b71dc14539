"""
CreateCustomerCommand.

Command to register a customer that licenses can be issued to.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CreateCustomerCommand:
    """Command to create a customer."""

    name: str
    email: str
    company: Optional[str] = None
