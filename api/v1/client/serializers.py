"""
Serializers for the remote-script API.
"""

from rest_framework import serializers

from api.v1.operator.serializers import ActivationSerializer


class ActivateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for activate license request."""

    licenseKey = serializers.CharField(source="license_key", max_length=100, trim_whitespace=True)
    serverIp = serializers.IPAddressField(source="server_ip")
    hostname = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )
    serverId = serializers.CharField(
        source="server_id", max_length=255, required=False, allow_blank=True, allow_null=True
    )


class ActivateLicenseResponseSerializer(serializers.Serializer):
    """
    Serializer for ActivateLicenseResponseDTO.

    ``remainingActivations`` is null for unlimited licenses.
    """

    activation = ActivationSerializer()
    created = serializers.BooleanField()
    maxActivations = serializers.IntegerField(source="max_activations")
    activeActivations = serializers.IntegerField(source="active_activations")
    remainingActivations = serializers.IntegerField(
        source="remaining_activations", allow_null=True
    )
