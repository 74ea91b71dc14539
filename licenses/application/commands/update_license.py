"""
License update commands.

Commands for changing the status, notes or activation cap of a license.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class UpdateLicenseCommand:
    """Partial update of a license; ``None`` fields are left unchanged."""

    license_id: uuid.UUID
    status: Optional[str] = None
    notes: Optional[str] = None
    max_activations: Optional[int] = None
