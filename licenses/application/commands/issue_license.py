"""
IssueLicenseCommand.

Command to issue a new license key to a customer.
"""

import uuid
from dataclasses import dataclass


@dataclass
class IssueLicenseCommand:
    """
    Command to issue a license.

    ``max_activations`` of 0 means the license may be active on any
    number of machines.
    """

    customer_id: uuid.UUID
    max_activations: int = 0
    notes: str = ""
