"""
Model registration for the activations app.
"""
from activations.infrastructure.models import LicenseActivation  # noqa: F401
