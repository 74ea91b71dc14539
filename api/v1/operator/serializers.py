"""
Serializers for operator API endpoints.

Wire fields are camelCase; ``source`` maps them onto the snake_case DTOs.
"""

from rest_framework import serializers

from core.domain.value_objects import LicenseStatus

STATUS_CHOICES = [status.value for status in LicenseStatus]


class CustomerCreateRequestSerializer(serializers.Serializer):
    """Serializer for create customer request."""

    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    company = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )


class CustomerSerializer(serializers.Serializer):
    """Serializer for CustomerDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()
    company = serializers.CharField(allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class IssueLicenseRequestSerializer(serializers.Serializer):
    """Serializer for issue license request."""

    customerId = serializers.UUIDField(source="customer_id")
    maxActivations = serializers.IntegerField(
        source="max_activations", required=False, default=0, min_value=0
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class UpdateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for the partial license update; every field is optional."""

    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    maxActivations = serializers.IntegerField(
        source="max_activations", required=False, min_value=0
    )


class LicenseListQuerySerializer(serializers.Serializer):
    """Serializer for license list query parameters."""

    customerId = serializers.UUIDField(source="customer_id", required=False)


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO. The key itself is never returned here."""

    id = serializers.UUIDField()
    customerId = serializers.UUIDField(source="customer_id")
    keyHint = serializers.CharField(source="key_hint")
    status = serializers.CharField()
    maxActivations = serializers.IntegerField(source="max_activations")
    activationCount = serializers.IntegerField(source="activation_count")
    remainingActivations = serializers.IntegerField(
        source="remaining_activations", allow_null=True
    )
    notes = serializers.CharField(allow_blank=True)
    lastActivatedAt = serializers.DateTimeField(source="last_activated_at", allow_null=True)
    lastActivatedIp = serializers.CharField(source="last_activated_ip", allow_null=True)
    lastActivatedHostname = serializers.CharField(
        source="last_activated_hostname", allow_null=True
    )
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class IssuedLicenseSerializer(LicenseSerializer):
    """
    Serializer for IssuedLicenseDTO.

    Same fields as a license plus the plaintext ``licenseKey``, which is
    only ever returned by issue and reissue.
    """

    licenseKey = serializers.CharField(source="license_key", read_only=True)

    def to_representation(self, instance):
        data = super().to_representation(instance.license)
        data["licenseKey"] = instance.license_key
        return data


class ActivationSerializer(serializers.Serializer):
    """Serializer for ActivationDTO."""

    id = serializers.UUIDField()
    licenseId = serializers.UUIDField(source="license_id")
    serverId = serializers.CharField(source="server_id", allow_null=True)
    serverIp = serializers.CharField(source="server_ip")
    hostname = serializers.CharField()
    status = serializers.CharField()
    activatedAt = serializers.DateTimeField(source="activated_at")
    releasedAt = serializers.DateTimeField(source="released_at", allow_null=True)


class ReleaseServerActivationsResponseSerializer(serializers.Serializer):
    """Serializer for the release-by-server response."""

    released = serializers.IntegerField()
