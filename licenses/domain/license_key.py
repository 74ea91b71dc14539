"""
LicenseKey value object.

The plaintext key is handed to the operator exactly once, when the
license is issued or reissued. Only its SHA-256 hash and a short
hint are persisted.
"""

import hashlib
import secrets
import string
from dataclasses import dataclass

KEY_ALPHABET = string.ascii_uppercase + string.digits
KEY_GROUPS = 5
KEY_GROUP_LENGTH = 5


def generate_license_key(prefix: str) -> str:
    """
    Generate a license key in format: PREFIX-XXXXX-XXXXX-XXXXX-XXXXX-XXXXX.

    Args:
        prefix: Key prefix (e.g., 'LIC')

    Returns:
        Generated license key string
    """
    parts = [
        "".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_GROUP_LENGTH))
        for _ in range(KEY_GROUPS)
    ]
    return f"{prefix}-{'-'.join(parts)}"


def hash_license_key(raw_key: str) -> str:
    """Return the lookup hash of a raw license key."""
    return hashlib.sha256(raw_key.strip().encode()).hexdigest()


@dataclass(frozen=True)
class LicenseKey:
    """A freshly generated license key together with its stored forms."""

    value: str
    key_hash: str
    hint: str

    def __post_init__(self):
        """Validate license key."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if len(self.value) > 100:
            raise ValueError("License key too long")
        if not self.key_hash or len(self.key_hash) != 64:
            raise ValueError("Invalid key hash")

    @classmethod
    def generate(cls, prefix: str) -> "LicenseKey":
        """
        Create a new random license key.

        Args:
            prefix: Key prefix

        Returns:
            LicenseKey with plaintext value, hash and hint
        """
        value = generate_license_key(prefix)
        return cls(value=value, key_hash=hash_license_key(value), hint=value[-4:])

    def __str__(self) -> str:
        return self.value
