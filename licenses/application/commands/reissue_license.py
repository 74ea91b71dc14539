"""
ReissueLicenseCommand.

Command to rotate the key of a license.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ReissueLicenseCommand:
    """Command to reissue a license key."""

    license_id: uuid.UUID
