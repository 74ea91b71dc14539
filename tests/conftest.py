"""
Pytest configuration and shared fixtures.
"""

import pytest
from asgiref.sync import async_to_sync
from django.core.cache import cache

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from customers.domain.customer import Customer
from customers.infrastructure.repositories.django_customer_repository import (
    DjangoCustomerRepository,
)
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

OPERATOR_KEY = "test-operator-key"


@pytest.fixture(autouse=True)
def clear_cache():
    """Rate limit counters live in the cache; start every test with none."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def customer_repository():
    """Fixture for CustomerRepository."""
    return DjangoCustomerRepository()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def activation_repository():
    """Fixture for ActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def sample_key():
    """Fixture for a freshly generated LicenseKey."""
    return LicenseKey.generate("TST")


@pytest.fixture
def sample_customer():
    """Fixture for a sample Customer entity."""
    return Customer.create(name="Acme Hosting", email="Ops@Acme.example", company="Acme")


@pytest.fixture
def sample_license(sample_customer, sample_key):
    """Fixture for a sample License entity with two slots."""
    return License.issue(customer_id=sample_customer.id, key=sample_key, max_activations=2)


@pytest.fixture
def db_customer(db, customer_repository, sample_customer):
    """Fixture for a Customer saved in database."""
    return async_to_sync(customer_repository.save)(sample_customer)


@pytest.fixture
def issue_license(db, db_customer, customer_repository, license_repository):
    """
    Factory fixture issuing licenses to ``db_customer``.

    Returns the IssuedLicenseDTO so tests get hold of the plaintext key.
    """

    def _issue(max_activations: int = 2, notes: str = ""):
        handler = IssueLicenseHandler(
            customer_repository=customer_repository,
            license_repository=license_repository,
        )
        return async_to_sync(handler.handle)(
            IssueLicenseCommand(
                customer_id=db_customer.id,
                max_activations=max_activations,
                notes=notes,
            )
        )

    return _issue


@pytest.fixture
def api_client():
    """Fixture for DRF API client authenticated as an operator."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.credentials(HTTP_X_API_KEY=OPERATOR_KEY)
    return client


@pytest.fixture
def anonymous_client():
    """Fixture for DRF API client without credentials."""
    from rest_framework.test import APIClient

    return APIClient()
