"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import ipaddress
from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class ServerAddress(ValueObject):
    """IPv4 or IPv6 address of a machine holding an activation."""

    value: str

    def __post_init__(self):
        """Validate and normalise the address."""
        try:
            normalised = str(ipaddress.ip_address(str(self.value).strip()))
        except ValueError as exc:
            raise ValueError(f"Invalid server IP address: {self.value}") from exc
        object.__setattr__(self, "value", normalised)

    def __str__(self) -> str:
        """Return address as string."""
        return self.value


class LicenseStatus(Enum):
    """License status value object."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    REVOKED = "revoked"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value

    @property
    def is_usable(self) -> bool:
        """Only active licenses accept new activations."""
        return self is LicenseStatus.ACTIVE

    def can_transition_to(self, target: "LicenseStatus") -> bool:
        """
        Check whether the lifecycle allows moving to ``target``.

        active <-> suspended, active|suspended -> revoked.
        Revoked is terminal.
        """
        if self is LicenseStatus.REVOKED:
            return target is LicenseStatus.REVOKED
        return True


class ActivationStatus(Enum):
    """Activation status value object."""

    ACTIVE = "active"
    RELEASED = "released"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value
