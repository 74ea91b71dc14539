"""
Integration tests for operator API endpoints.
"""

import uuid

import pytest
from django.urls import reverse

from licenses.infrastructure.models import License as LicenseModel


@pytest.fixture
def customer_id(api_client):
    response = api_client.post(
        reverse("operator:customers"),
        {"name": "Acme Hosting", "email": "ops@acme.example", "company": "Acme"},
        format="json",
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def issued(api_client, customer_id):
    response = api_client.post(
        reverse("operator:licenses"),
        {"customerId": customer_id, "maxActivations": 2, "notes": "pilot"},
        format="json",
    )
    assert response.status_code == 201
    return response.json()


def activate(client, key, ip, **extra):
    return client.post(
        reverse("client:activate"),
        {"licenseKey": key, "serverIp": ip, **extra},
        format="json",
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestOperatorAuthentication:
    """The operator surface requires an API key."""

    def test_missing_key(self, anonymous_client):
        response = anonymous_client.get(reverse("operator:licenses"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_wrong_key(self, anonymous_client):
        anonymous_client.credentials(HTTP_X_API_KEY="nope")

        response = anonymous_client.get(reverse("operator:customers"))

        assert response.status_code == 401

    def test_bearer_token(self, anonymous_client):
        anonymous_client.credentials(HTTP_AUTHORIZATION="Bearer test-operator-key")

        assert anonymous_client.get(reverse("operator:customers")).status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
class TestCustomerAPI:
    """Integration tests for customer endpoints."""

    def test_create_customer(self, api_client):
        response = api_client.post(
            reverse("operator:customers"),
            {"name": "Acme", "email": "OPS@acme.example"},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "ops@acme.example"
        assert data["company"] is None
        assert "createdAt" in data

    def test_create_customer_invalid_email(self, api_client):
        response = api_client.post(
            reverse("operator:customers"), {"name": "Acme", "email": "nope"}, format="json"
        )

        assert response.status_code == 400
        body = response.json()["error"]
        assert body["code"] == "VALIDATION_ERROR"
        assert "email" in body["details"]

    def test_get_and_list_customers(self, api_client, customer_id):
        detail = api_client.get(reverse("operator:customer-detail", args=[customer_id]))
        listing = api_client.get(reverse("operator:customers"))

        assert detail.status_code == 200
        assert detail.json()["name"] == "Acme Hosting"
        assert [customer["id"] for customer in listing.json()] == [customer_id]

    def test_get_unknown_customer(self, api_client):
        response = api_client.get(reverse("operator:customer-detail", args=[uuid.uuid4()]))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CUSTOMER_NOT_FOUND"


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAPI:
    """Integration tests for license endpoints."""

    def test_issue_license(self, issued, customer_id):
        assert issued["customerId"] == customer_id
        assert issued["licenseKey"].startswith("TST-")
        assert issued["keyHint"] == issued["licenseKey"][-4:]
        assert issued["maxActivations"] == 2
        assert issued["activationCount"] == 0
        assert issued["remainingActivations"] == 2
        assert issued["status"] == "active"
        assert issued["notes"] == "pilot"

    def test_issue_defaults_to_unlimited(self, api_client, customer_id):
        response = api_client.post(
            reverse("operator:licenses"), {"customerId": customer_id}, format="json"
        )

        assert response.status_code == 201
        assert response.json()["maxActivations"] == 0
        assert response.json()["remainingActivations"] is None

    def test_issue_for_unknown_customer(self, api_client):
        response = api_client.post(
            reverse("operator:licenses"), {"customerId": str(uuid.uuid4())}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_issue_negative_cap(self, api_client, customer_id):
        response = api_client.post(
            reverse("operator:licenses"),
            {"customerId": customer_id, "maxActivations": -1},
            format="json",
        )

        assert response.status_code == 400
        assert "maxActivations" in response.json()["error"]["details"]

    def test_key_never_returned_after_issue(self, api_client, issued):
        detail = api_client.get(reverse("operator:license-detail", args=[issued["id"]]))
        listing = api_client.get(reverse("operator:licenses"))

        assert detail.status_code == 200
        assert "licenseKey" not in detail.json()
        assert all("licenseKey" not in license for license in listing.json())

    def test_list_licenses_by_customer(self, api_client, issued, customer_id):
        mine = api_client.get(reverse("operator:licenses"), {"customerId": customer_id})
        other = api_client.get(reverse("operator:licenses"), {"customerId": str(uuid.uuid4())})
        bad = api_client.get(reverse("operator:licenses"), {"customerId": "not-a-uuid"})

        assert [license["id"] for license in mine.json()] == [issued["id"]]
        assert other.json() == []
        assert bad.status_code == 400

    def test_get_unknown_license(self, api_client):
        response = api_client.get(reverse("operator:license-detail", args=[uuid.uuid4()]))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LICENSE_NOT_FOUND"
        assert "X-Trace-ID" in response

    def test_update_license(self, api_client, issued):
        response = api_client.patch(
            reverse("operator:license-detail", args=[issued["id"]]),
            {"status": "suspended", "notes": "unpaid invoice", "maxActivations": 5},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "suspended"
        assert data["notes"] == "unpaid invoice"
        assert data["maxActivations"] == 5

    def test_update_unknown_status(self, api_client, issued):
        response = api_client.patch(
            reverse("operator:license-detail", args=[issued["id"]]),
            {"status": "expired"},
            format="json",
        )

        assert response.status_code == 400

    def test_update_revoked_is_final(self, api_client, issued):
        url = reverse("operator:license-detail", args=[issued["id"]])
        api_client.patch(url, {"status": "revoked"}, format="json")

        response = api_client.patch(url, {"status": "active"}, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    def test_lower_cap_below_active(self, api_client, anonymous_client, issued):
        activate(anonymous_client, issued["licenseKey"], "10.0.0.1")
        activate(anonymous_client, issued["licenseKey"], "10.0.0.2")

        response = api_client.patch(
            reverse("operator:license-detail", args=[issued["id"]]),
            {"maxActivations": 1},
            format="json",
        )

        assert response.status_code == 400
        assert LicenseModel.objects.get(id=issued["id"]).max_activations == 2

    def test_reissue(self, api_client, anonymous_client, issued):
        response = api_client.post(reverse("operator:license-reissue", args=[issued["id"]]))

        assert response.status_code == 200
        new_key = response.json()["licenseKey"]
        assert new_key != issued["licenseKey"]
        assert activate(anonymous_client, issued["licenseKey"], "10.0.0.1").status_code == 404
        assert activate(anonymous_client, new_key, "10.0.0.1").status_code == 201

    def test_reissue_unknown_license(self, api_client):
        response = api_client.post(reverse("operator:license-reissue", args=[uuid.uuid4()]))

        assert response.status_code == 404

    def test_delete_license(self, api_client, anonymous_client, issued):
        activate(anonymous_client, issued["licenseKey"], "10.0.0.1")
        url = reverse("operator:license-detail", args=[issued["id"]])

        assert api_client.delete(url).status_code == 204
        assert api_client.get(url).status_code == 404
        assert api_client.delete(url).status_code == 404


@pytest.mark.django_db
@pytest.mark.integration
class TestActivationAPI:
    """Integration tests for operator activation endpoints."""

    def test_list_activations(self, api_client, anonymous_client, issued):
        activate(anonymous_client, issued["licenseKey"], "10.0.0.1", hostname="web-1")

        response = api_client.get(reverse("operator:license-activations", args=[issued["id"]]))

        assert response.status_code == 200
        [activation] = response.json()
        assert activation["serverIp"] == "10.0.0.1"
        assert activation["hostname"] == "web-1"
        assert activation["status"] == "active"
        assert activation["releasedAt"] is None
        assert activation["licenseId"] == issued["id"]

    def test_list_activations_unknown_license(self, api_client):
        response = api_client.get(reverse("operator:license-activations", args=[uuid.uuid4()]))

        assert response.status_code == 404

    def test_release_activation(self, api_client, anonymous_client, issued):
        activation_id = activate(anonymous_client, issued["licenseKey"], "10.0.0.1").json()[
            "activation"
        ]["id"]
        url = reverse("operator:activation-release", args=[issued["id"], activation_id])

        response = api_client.post(url)

        assert response.status_code == 200
        assert response.json()["status"] == "released"
        assert response.json()["releasedAt"] is not None
        assert api_client.post(url).status_code == 404
        detail = api_client.get(reverse("operator:license-detail", args=[issued["id"]]))
        assert detail.json()["activationCount"] == 0

    def test_release_server_activations(self, api_client, anonymous_client, issued):
        activate(anonymous_client, issued["licenseKey"], "10.0.0.1", serverId="srv-1")
        activate(anonymous_client, issued["licenseKey"], "10.0.0.2", serverId="srv-2")

        response = api_client.post(
            reverse("operator:server-release-activations", args=["srv-1"])
        )

        assert response.status_code == 200
        assert response.json() == {"released": 1}
        detail = api_client.get(reverse("operator:license-detail", args=[issued["id"]]))
        assert detail.json()["activationCount"] == 1
