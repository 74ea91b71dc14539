"""
ActivateLicenseCommand.

Command sent by a remote script to activate a license on its machine.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ActivateLicenseCommand:
    """Command to activate a license for a machine."""

    license_key: str
    server_ip: str
    hostname: Optional[str] = None
    server_id: Optional[str] = None
