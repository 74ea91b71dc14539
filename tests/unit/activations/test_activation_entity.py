"""
Unit tests for LicenseActivation domain entity.
"""

import uuid
from datetime import timedelta

import pytest

from activations.domain.activation import UNKNOWN_HOSTNAME, LicenseActivation
from core.domain.exceptions import ActivationAlreadyReleasedError, DomainValidationError
from core.domain.value_objects import ActivationStatus


class TestLicenseActivation:
    """Tests for LicenseActivation domain entity."""

    def test_create_activation(self):
        license_id = uuid.uuid4()

        activation = LicenseActivation.create(
            license_id=license_id,
            server_ip="192.168.0.10",
            hostname="web-1",
            server_id="srv-42",
        )

        assert activation.license_id == license_id
        assert str(activation.server_ip) == "192.168.0.10"
        assert activation.hostname == "web-1"
        assert activation.server_id == "srv-42"
        assert activation.status == ActivationStatus.ACTIVE
        assert activation.released_at is None
        assert activation.is_active is True

    def test_missing_hostname_defaults(self):
        activation = LicenseActivation.create(license_id=uuid.uuid4(), server_ip="10.0.0.1")

        assert activation.hostname == UNKNOWN_HOSTNAME
        assert activation.server_id is None

    def test_invalid_ip_rejected(self):
        with pytest.raises(DomainValidationError, match="Invalid server IP"):
            LicenseActivation.create(license_id=uuid.uuid4(), server_ip="not-an-ip")

    def test_release(self):
        activation = LicenseActivation.create(license_id=uuid.uuid4(), server_ip="10.0.0.1")

        released = activation.release()

        assert released.status == ActivationStatus.RELEASED
        assert released.is_active is False
        assert released.released_at >= released.activated_at

    def test_release_time_never_precedes_activation(self):
        activation = LicenseActivation.create(license_id=uuid.uuid4(), server_ip="10.0.0.1")

        released = activation.release(activation.activated_at - timedelta(minutes=5))

        assert released.released_at == activation.activated_at

    def test_release_twice_rejected(self):
        released = LicenseActivation.create(
            license_id=uuid.uuid4(), server_ip="10.0.0.1"
        ).release()

        with pytest.raises(ActivationAlreadyReleasedError):
            released.release()
