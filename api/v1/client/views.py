"""
Remote-script API views.

Scripts running on licensed servers call these endpoints to claim an
activation slot. The license key in the body is the only credential.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.handlers.activate_license_handler import ActivateLicenseHandler
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from api.v1.client.serializers import (
    ActivateLicenseRequestSerializer,
    ActivateLicenseResponseSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer

# Initialize repositories (in production, use DI container)
_activation_repo = DjangoActivationRepository()

tracer = get_tracer(__name__)


class ActivateLicenseView(APIView):
    """View for activating a license on a server."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description=(
            "Claim an activation slot for the calling server. A server that already "
            "holds an active slot on this license (same `serverIp`) gets that "
            "activation back with `created: false` and status 200."
        ),
        tags=["Client API"],
        auth=[],
        request=ActivateLicenseRequestSerializer,
        responses={
            201: ActivateLicenseResponseSerializer,
            200: ActivateLicenseResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License is suspended or revoked"},
            404: {"description": "License key not found"},
            409: {"description": "Activation limit reached"},
            429: {"description": "Too many requests"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license."""
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        with tracer.start_as_current_span("activate_license") as span:
            span.set_attribute("operation", "activate_license")

            serializer = ActivateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                serializer.is_valid(raise_exception=True)
            data = serializer.validated_data
            span.set_attribute("server.ip", data["server_ip"])

            handler = ActivateLicenseHandler(activation_repository=_activation_repo)
            result = await handler.handle(
                ActivateLicenseCommand(
                    license_key=data["license_key"],
                    server_ip=data["server_ip"],
                    hostname=data.get("hostname") or None,
                    server_id=data.get("server_id") or None,
                )
            )

            span.set_attribute("activation.id", str(result.activation.id))
            span.set_attribute("activation.created", result.created)
            span.set_status(Status(StatusCode.OK))
            return Response(
                ActivateLicenseResponseSerializer(result).data,
                status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
            )
