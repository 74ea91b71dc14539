"""
Release commands.

Commands that give activation slots back to their license.
"""

import uuid
from dataclasses import dataclass


@dataclass
class ReleaseActivationCommand:
    """Command to release one activation of a license."""

    license_id: uuid.UUID
    activation_id: uuid.UUID


@dataclass
class ReleaseServerActivationsCommand:
    """Command to release every activation held by an external server record."""

    server_id: str


@dataclass
class ReconcileActivationCountsCommand:
    """Command to rewrite cached activation counts from the live rows."""

    dry_run: bool = False
