"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Every failure path of the
license capacity manager raises a distinct subclass so callers can
tell "wait and retry" apart from "stop and alert".
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class DomainValidationError(DomainException):
    """Raised when input violates a domain rule (bad capacity, unknown customer...)."""

    def __init__(self, message: str = "Invalid input", code: str = "VALIDATION_ERROR"):
        super().__init__(message, code=code)


class InvalidStatusTransitionError(DomainValidationError):
    """Raised when a license status change is not allowed by the lifecycle."""

    def __init__(self, message: str = "Invalid license status transition"):
        super().__init__(message, code="INVALID_STATUS_TRANSITION")


class CustomerNotFoundError(DomainException):
    """Raised when a customer is not found."""

    def __init__(self, message: str = "Customer not found"):
        super().__init__(message, code="CUSTOMER_NOT_FOUND")


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license id or key does not match any license."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class LicenseNotActiveError(LicenseException):
    """Raised when a suspended or revoked license is asked to activate."""

    def __init__(self, message: str = "License is not active"):
        super().__init__(message, code="LICENSE_NOT_ACTIVE")


class ActivationLimitExceededError(LicenseException):
    """Raised when every activation slot of a license is taken."""

    def __init__(self, message: str = "License activation limit reached"):
        super().__init__(message, code="CAPACITY_EXCEEDED")


class ActivationException(DomainException):
    """Base exception for activation-related errors."""

    pass


class ActivationNotFoundError(ActivationException):
    """Raised when an activation is not found for the given license."""

    def __init__(self, message: str = "Activation not found", code: str = "ACTIVATION_NOT_FOUND"):
        super().__init__(message, code=code)


class ActivationAlreadyReleasedError(ActivationNotFoundError):
    """Raised when releasing an activation that no longer holds a slot."""

    def __init__(self, message: str = "Activation is already released"):
        super().__init__(message, code="ACTIVATION_NOT_FOUND")
