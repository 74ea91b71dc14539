"""
Integration tests for activation handlers.
"""

import threading
import uuid

import pytest
from asgiref.sync import async_to_sync
from django.core.management import call_command
from django.db import connection, connections

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.commands.release_activation import (
    ReconcileActivationCountsCommand,
    ReleaseActivationCommand,
    ReleaseServerActivationsCommand,
)
from activations.application.handlers.activate_license_handler import ActivateLicenseHandler
from activations.application.handlers.list_activations_handler import ListActivationsHandler
from activations.application.handlers.release_activation_handlers import (
    ReconcileActivationCountsHandler,
    ReleaseActivationHandler,
    ReleaseServerActivationsHandler,
)
from activations.application.queries.list_activations import ListActivationsQuery
from activations.infrastructure.models import LicenseActivation as ActivationModel
from core.domain.exceptions import (
    ActivationLimitExceededError,
    ActivationNotFoundError,
    DomainValidationError,
    LicenseNotFoundError,
)
from licenses.infrastructure.models import AuditLog
from licenses.infrastructure.models import License as LicenseModel


@pytest.fixture
def activate(activation_repository):
    """Run ActivateLicenseHandler synchronously."""
    handler = ActivateLicenseHandler(activation_repository)

    def _activate(key, ip, hostname=None, server_id=None):
        return async_to_sync(handler.handle)(
            ActivateLicenseCommand(
                license_key=key, server_ip=ip, hostname=hostname, server_id=server_id
            )
        )

    return _activate


@pytest.mark.django_db
@pytest.mark.integration
class TestActivateLicenseHandler:
    """Tests for ActivateLicenseHandler."""

    def test_cap_of_two(self, issue_license, activate):
        issued = issue_license(max_activations=2)

        first = activate(issued.license_key, "10.0.0.1", hostname="web-1")
        second = activate(issued.license_key, "10.0.0.2")

        assert first.created and second.created
        assert first.remaining_activations == 1
        assert second.active_activations == 2
        assert second.remaining_activations == 0
        assert second.activation.hostname == "unknown"
        with pytest.raises(ActivationLimitExceededError):
            activate(issued.license_key, "10.0.0.3")
        assert ActivationModel.objects.filter(license_id=issued.license.id).count() == 2

    def test_unlimited_license(self, issue_license, activate):
        issued = issue_license(max_activations=0)

        results = [activate(issued.license_key, f"10.0.0.{n}") for n in range(1, 6)]

        assert all(result.created for result in results)
        assert results[-1].active_activations == 5
        assert results[-1].remaining_activations is None
        assert results[-1].max_activations == 0

    def test_same_ip_reuses_activation(self, issue_license, activate):
        issued = issue_license(max_activations=1)
        first = activate(issued.license_key, "10.0.0.1")

        again = activate(issued.license_key, "10.0.0.1", hostname="renamed")

        assert again.created is False
        assert again.activation.id == first.activation.id
        assert again.active_activations == 1
        assert AuditLog.objects.filter(action="activation_created").count() == 1

    def test_release_frees_slot(self, issue_license, activate, activation_repository):
        issued = issue_license(max_activations=1)
        first = activate(issued.license_key, "10.0.0.1")

        released = async_to_sync(ReleaseActivationHandler(activation_repository).handle)(
            ReleaseActivationCommand(
                license_id=issued.license.id, activation_id=first.activation.id
            )
        )

        assert released.status == "released"
        assert released.released_at is not None
        second = activate(issued.license_key, "10.0.0.2")
        assert second.created is True
        assert second.active_activations == 1
        with pytest.raises(ActivationLimitExceededError):
            activate(issued.license_key, "10.0.0.3")

    def test_release_and_reactivate_walkthrough(
        self, issue_license, activate, activation_repository
    ):
        issued = issue_license(max_activations=2)
        first = activate(issued.license_key, "1.1.1.1")
        activate(issued.license_key, "2.2.2.2")
        with pytest.raises(ActivationLimitExceededError):
            activate(issued.license_key, "3.3.3.3")

        async_to_sync(ReleaseActivationHandler(activation_repository).handle)(
            ReleaseActivationCommand(
                license_id=issued.license.id, activation_id=first.activation.id
            )
        )
        third = activate(issued.license_key, "3.3.3.3")

        assert third.created is True
        assert third.active_activations == 2
        assert third.remaining_activations == 0
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == 2
        assert set(
            ActivationModel.objects.filter(
                license_id=issued.license.id, status="active"
            ).values_list("server_ip", flat=True)
        ) == {"2.2.2.2", "3.3.3.3"}

    def test_released_ip_gets_new_activation(self, issue_license, activate, activation_repository):
        issued = issue_license(max_activations=1)
        first = activate(issued.license_key, "10.0.0.1")
        async_to_sync(ReleaseActivationHandler(activation_repository).handle)(
            ReleaseActivationCommand(
                license_id=issued.license.id, activation_id=first.activation.id
            )
        )

        again = activate(issued.license_key, "10.0.0.1")

        assert again.created is True
        assert again.activation.id != first.activation.id

    def test_unknown_key(self, db, activate):
        with pytest.raises(LicenseNotFoundError):
            activate("TST-AAAAA-BBBBB-CCCCC-DDDDD-EEEEE", "10.0.0.1")

    def test_invalid_ip(self, issue_license, activate):
        issued = issue_license()

        with pytest.raises(DomainValidationError):
            activate(issued.license_key, "localhost")

    def test_key_with_whitespace(self, issue_license, activate):
        issued = issue_license()

        assert activate(f"  {issued.license_key}\n", "10.0.0.1").created is True

    def test_activation_updates_license(self, issue_license, activate):
        issued = issue_license()

        activate(issued.license_key, "10.0.0.9", hostname="db-1")

        row = LicenseModel.objects.get(id=issued.license.id)
        assert row.activation_count == 1
        assert row.last_activated_ip == "10.0.0.9"
        assert row.last_activated_hostname == "db-1"
        assert row.last_activated_at is not None


@pytest.mark.django_db
@pytest.mark.integration
class TestReleaseHandlers:
    """Tests for the release and reconcile handlers."""

    def test_release_unknown_activation(self, issue_license, activation_repository):
        issued = issue_license()

        with pytest.raises(ActivationNotFoundError):
            async_to_sync(ReleaseActivationHandler(activation_repository).handle)(
                ReleaseActivationCommand(license_id=issued.license.id, activation_id=uuid.uuid4())
            )

    def test_release_unknown_license(self, db, activation_repository):
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(ReleaseActivationHandler(activation_repository).handle)(
                ReleaseActivationCommand(license_id=uuid.uuid4(), activation_id=uuid.uuid4())
            )

    def test_release_is_audited(self, issue_license, activate, activation_repository):
        issued = issue_license()
        first = activate(issued.license_key, "10.0.0.1")

        async_to_sync(ReleaseActivationHandler(activation_repository).handle)(
            ReleaseActivationCommand(
                license_id=issued.license.id, activation_id=first.activation.id
            )
        )

        entry = AuditLog.objects.get(action="activation_released")
        assert entry.entity_id == str(first.activation.id)
        assert entry.changes["license_id"] == str(issued.license.id)

    def test_release_server_activations(self, issue_license, activate, activation_repository):
        first, second = issue_license(), issue_license()
        activate(first.license_key, "10.0.0.1", server_id="srv-7")
        activate(second.license_key, "10.0.0.1", server_id="srv-7")
        activate(second.license_key, "10.0.0.2", server_id="srv-8")
        handler = ReleaseServerActivationsHandler(activation_repository)

        released = async_to_sync(handler.handle)(ReleaseServerActivationsCommand(server_id="srv-7"))

        assert released == 2
        assert async_to_sync(handler.handle)(
            ReleaseServerActivationsCommand(server_id="srv-7")
        ) == 0
        assert LicenseModel.objects.get(id=second.license.id).activation_count == 1

    def test_reconcile_repairs_drift(self, issue_license, activate, activation_repository):
        issued = issue_license()
        activate(issued.license_key, "10.0.0.1")
        activate(issued.license_key, "10.0.0.2")
        LicenseModel.objects.filter(id=issued.license.id).update(activation_count=0)
        handler = ReconcileActivationCountsHandler(activation_repository)

        assert async_to_sync(handler.handle)(ReconcileActivationCountsCommand()) == 1
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == 2

    def test_reconcile_management_command(self, issue_license, activate, capsys):
        issued = issue_license()
        activate(issued.license_key, "10.0.0.1")
        LicenseModel.objects.filter(id=issued.license.id).update(activation_count=5)

        call_command("reconcile_activation_counts", "--dry-run")
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == 5

        call_command("reconcile_activation_counts")
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == 1
        assert "Found 1 license(s)" in capsys.readouterr().out

    def test_list_activations(
        self, issue_license, activate, license_repository, activation_repository
    ):
        issued = issue_license()
        activate(issued.license_key, "10.0.0.1")
        activate(issued.license_key, "10.0.0.2")
        handler = ListActivationsHandler(license_repository, activation_repository)

        result = async_to_sync(handler.handle)(ListActivationsQuery(license_id=issued.license.id))

        assert {activation.server_ip for activation in result} == {"10.0.0.1", "10.0.0.2"}
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(handler.handle)(ListActivationsQuery(license_id=uuid.uuid4()))


@pytest.mark.postgres
@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestConcurrentActivation:
    """Row locks keep concurrent activations under the cap."""

    WORKERS = 12
    CAP = 3

    def test_parallel_activations_respect_cap(self, issue_license, activation_repository):
        if connection.vendor != "postgresql":
            pytest.skip("needs SELECT ... FOR UPDATE")

        issued = issue_license(max_activations=self.CAP)
        handler = ActivateLicenseHandler(activation_repository)
        barrier = threading.Barrier(self.WORKERS)
        outcomes = []
        lock = threading.Lock()

        def worker(n):
            barrier.wait()
            outcome = "error"
            try:
                async_to_sync(handler.handle)(
                    ActivateLicenseCommand(license_key=issued.license_key, server_ip=f"10.1.0.{n}")
                )
                outcome = "created"
            except ActivationLimitExceededError:
                outcome = "full"
            finally:
                connections.close_all()
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(self.WORKERS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count("created") == self.CAP
        assert outcomes.count("full") == self.WORKERS - self.CAP
        assert ActivationModel.objects.filter(
            license_id=issued.license.id, status="active"
        ).count() == self.CAP
        assert LicenseModel.objects.get(id=issued.license.id).activation_count == self.CAP
