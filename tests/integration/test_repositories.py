"""
Integration tests for repository implementations.
"""

import uuid

import pytest
from asgiref.sync import async_to_sync

from core.domain.exceptions import (
    ActivationAlreadyReleasedError,
    ActivationLimitExceededError,
    ActivationNotFoundError,
    DomainValidationError,
    InvalidStatusTransitionError,
    LicenseNotFoundError,
)
from core.domain.value_objects import ActivationStatus, LicenseStatus
from customers.domain.customer import Customer
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey, hash_license_key
from licenses.infrastructure.models import License as LicenseModel


@pytest.mark.django_db
@pytest.mark.integration
class TestCustomerRepository:
    """Integration tests for CustomerRepository."""

    def test_save_and_find(self, customer_repository, sample_customer):
        saved = async_to_sync(customer_repository.save)(sample_customer)

        found = async_to_sync(customer_repository.find_by_id)(saved.id)

        assert found is not None
        assert found.name == "Acme Hosting"
        assert str(found.email) == "ops@acme.example"

    def test_find_not_found(self, customer_repository):
        assert async_to_sync(customer_repository.find_by_id)(uuid.uuid4()) is None

    def test_exists_and_list(self, customer_repository):
        first = async_to_sync(customer_repository.save)(
            Customer.create(name="First", email="first@example.com")
        )
        second = async_to_sync(customer_repository.save)(
            Customer.create(name="Second", email="second@example.com")
        )

        assert async_to_sync(customer_repository.exists)(first.id) is True
        assert async_to_sync(customer_repository.exists)(uuid.uuid4()) is False
        ids = {customer.id for customer in async_to_sync(customer_repository.list_all)()}
        assert {first.id, second.id} <= ids


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseRepository:
    """Integration tests for LicenseRepository."""

    def test_save_and_find(self, license_repository, db_customer):
        license = License.issue(
            customer_id=db_customer.id, key=LicenseKey.generate("TST"), max_activations=2
        )
        saved = async_to_sync(license_repository.save)(license)

        found = async_to_sync(license_repository.find_by_id)(saved.id)

        assert found.id == license.id
        assert found.key_hash == license.key_hash
        assert found.max_activations == 2
        assert found.status == LicenseStatus.ACTIVE

    def test_update_does_not_touch_key_or_counters(self, license_repository, issue_license):
        issued = issue_license(max_activations=2)
        LicenseModel.objects.filter(id=issued.license.id).update(
            activation_count=1, key_hint="ZZZZ"
        )

        before, after = async_to_sync(license_repository.update)(
            issued.license.id, notes="edited"
        )

        assert before.notes == ""
        assert after.notes == "edited"
        row = LicenseModel.objects.get(id=issued.license.id)
        assert row.notes == "edited"
        assert row.activation_count == 1
        assert row.key_hint == "ZZZZ"

    def test_update_decides_against_current_row(self, license_repository, issue_license):
        """A snapshot read before a revoke cannot be used to leave the revoked state."""
        issued = issue_license()
        snapshot = async_to_sync(license_repository.find_by_id)(issued.license.id)
        async_to_sync(license_repository.update)(issued.license.id, status=LicenseStatus.REVOKED)

        assert snapshot.status == LicenseStatus.ACTIVE
        with pytest.raises(InvalidStatusTransitionError):
            async_to_sync(license_repository.update)(
                snapshot.id, status=LicenseStatus.SUSPENDED
            )
        async_to_sync(license_repository.update)(snapshot.id, notes="closed account")

        row = LicenseModel.objects.get(id=issued.license.id)
        assert row.status == LicenseStatus.REVOKED.value
        assert row.notes == "closed account"

    def test_update_without_changes(self, license_repository, issue_license):
        issued = issue_license(max_activations=2)

        before, after = async_to_sync(license_repository.update)(
            issued.license.id, status=LicenseStatus.ACTIVE, max_activations=2
        )

        assert after is before

    def test_update_capacity(self, license_repository, activation_repository, issue_license):
        issued = issue_license(max_activations=3)
        for ip in ("10.0.0.1", "10.0.0.2"):
            async_to_sync(activation_repository.claim)(hash_license_key(issued.license_key), ip)

        before, after = async_to_sync(license_repository.update)(
            issued.license.id, max_activations=2
        )

        assert before.max_activations == 3
        assert after.max_activations == 2
        assert after.activation_count == 2
        with pytest.raises(DomainValidationError):
            async_to_sync(license_repository.update)(issued.license.id, max_activations=1)
        assert LicenseModel.objects.get(id=issued.license.id).max_activations == 2

    def test_update_missing_license(self, license_repository, db):
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(license_repository.update)(uuid.uuid4(), notes="x")

    def test_rotate_key(self, license_repository, issue_license):
        issued = issue_license()
        new_key = LicenseKey.generate("TST")

        rotated = async_to_sync(license_repository.rotate_key)(
            issued.license.id, new_key.key_hash, new_key.hint
        )

        assert rotated.key_hash == new_key.key_hash
        assert not LicenseModel.objects.filter(
            key_hash=hash_license_key(issued.license_key)
        ).exists()

    def test_rotate_key_missing_license(self, license_repository):
        key = LicenseKey.generate("TST")
        rotated = async_to_sync(license_repository.rotate_key)(uuid.uuid4(), key.key_hash, key.hint)
        assert rotated is None

    def test_find_all_by_customer(self, license_repository, issue_license, customer_repository):
        first = issue_license()
        second = issue_license()
        other = async_to_sync(customer_repository.save)(
            Customer.create(name="Other", email="other@example.com")
        )

        mine = async_to_sync(license_repository.find_all)(customer_id=first.license.customer_id)
        theirs = async_to_sync(license_repository.find_all)(customer_id=other.id)

        assert {license.id for license in mine} == {first.license.id, second.license.id}
        assert theirs == []

    def test_delete(self, license_repository, issue_license):
        issued = issue_license()

        assert async_to_sync(license_repository.delete)(issued.license.id) is True
        assert async_to_sync(license_repository.delete)(issued.license.id) is False
        assert async_to_sync(license_repository.exists)(issued.license.id) is False


@pytest.mark.django_db
@pytest.mark.integration
class TestActivationRepository:
    """Integration tests for ActivationRepository."""

    def _claim(self, repository, key, ip, **kwargs):
        return async_to_sync(repository.claim)(hash_license_key(key), ip, **kwargs)

    def test_claim_creates_activation(self, activation_repository, issue_license):
        issued = issue_license(max_activations=2)

        claim = self._claim(
            activation_repository, issued.license_key, "10.0.0.1", hostname="web-1"
        )

        assert claim.created is True
        assert claim.activation.status == ActivationStatus.ACTIVE
        assert claim.license.activation_count == 1
        row = LicenseModel.objects.get(id=issued.license.id)
        assert row.activation_count == 1
        assert row.last_activated_ip == "10.0.0.1"
        assert row.last_activated_hostname == "web-1"

    def test_claim_reuses_activation_for_same_ip(self, activation_repository, issue_license):
        issued = issue_license(max_activations=1)
        first = self._claim(activation_repository, issued.license_key, "10.0.0.1")

        again = self._claim(activation_repository, issued.license_key, "10.0.0.1")

        assert again.created is False
        assert again.activation.id == first.activation.id
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == 1

    def test_claim_full_license(self, activation_repository, issue_license):
        issued = issue_license(max_activations=1)
        self._claim(activation_repository, issued.license_key, "10.0.0.1")

        with pytest.raises(ActivationLimitExceededError):
            self._claim(activation_repository, issued.license_key, "10.0.0.2")

    def test_claim_unknown_key(self, activation_repository, db):
        with pytest.raises(LicenseNotFoundError):
            self._claim(activation_repository, "TST-NOPE", "10.0.0.1")

    def test_claim_invalid_ip(self, activation_repository, issue_license):
        issued = issue_license()

        with pytest.raises(DomainValidationError):
            self._claim(activation_repository, issued.license_key, "300.0.0.1")

    def test_release(self, activation_repository, issue_license):
        issued = issue_license(max_activations=1)
        claim = self._claim(activation_repository, issued.license_key, "10.0.0.1")

        release = async_to_sync(activation_repository.release)(
            issued.license.id, claim.activation.id
        )

        assert release.activation.status == ActivationStatus.RELEASED
        assert release.license.activation_count == 0
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == 0

    def test_release_twice(self, activation_repository, issue_license):
        issued = issue_license()
        claim = self._claim(activation_repository, issued.license_key, "10.0.0.1")
        async_to_sync(activation_repository.release)(issued.license.id, claim.activation.id)

        with pytest.raises(ActivationAlreadyReleasedError):
            async_to_sync(activation_repository.release)(issued.license.id, claim.activation.id)

    def test_release_activation_of_other_license(self, activation_repository, issue_license):
        first, second = issue_license(), issue_license()
        claim = self._claim(activation_repository, first.license_key, "10.0.0.1")

        with pytest.raises(ActivationNotFoundError):
            async_to_sync(activation_repository.release)(second.license.id, claim.activation.id)

    def test_release_by_server(self, activation_repository, issue_license):
        first, second = issue_license(), issue_license()
        self._claim(activation_repository, first.license_key, "10.0.0.1", server_id="srv-1")
        self._claim(activation_repository, second.license_key, "10.0.0.1", server_id="srv-1")
        self._claim(activation_repository, second.license_key, "10.0.0.2", server_id="srv-2")

        releases = async_to_sync(activation_repository.release_by_server)("srv-1")

        assert len(releases) == 2
        assert LicenseModel.objects.get(id=first.license.id).activation_count == 0
        assert LicenseModel.objects.get(id=second.license.id).activation_count == 1

    def test_find_all_by_license_includes_released(self, activation_repository, issue_license):
        issued = issue_license()
        claim = self._claim(activation_repository, issued.license_key, "10.0.0.1")
        self._claim(activation_repository, issued.license_key, "10.0.0.2")
        async_to_sync(activation_repository.release)(issued.license.id, claim.activation.id)

        everything = async_to_sync(activation_repository.find_all_by_license)(issued.license.id)
        active = [activation for activation in everything if activation.is_active]

        assert len(everything) == 2
        assert [str(activation.server_ip) for activation in active] == ["10.0.0.2"]

    def test_reconcile_counts(self, activation_repository, issue_license):
        issued = issue_license()
        self._claim(activation_repository, issued.license_key, "10.0.0.1")
        LicenseModel.objects.filter(id=issued.license.id).update(activation_count=7)

        assert async_to_sync(activation_repository.reconcile_counts)(dry_run=True) == 1
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == 7

        assert async_to_sync(activation_repository.reconcile_counts)() == 1
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == 1
        assert async_to_sync(activation_repository.reconcile_counts)() == 0
