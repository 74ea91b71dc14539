"""
ListActivationsQuery.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ListActivationsQuery:
    """Query to list the activations of a license, newest first."""

    license_id: uuid.UUID
