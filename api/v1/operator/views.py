"""
Operator API views.

These endpoints are used by operators to:
- Register customers
- Issue, reissue, update and delete licenses
- Inspect and release activations
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.release_activation import (
    ReleaseActivationCommand,
    ReleaseServerActivationsCommand,
)
from activations.application.handlers.list_activations_handler import ListActivationsHandler
from activations.application.handlers.release_activation_handlers import (
    ReleaseActivationHandler,
    ReleaseServerActivationsHandler,
)
from activations.application.queries.list_activations import ListActivationsQuery
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from api.v1.operator.serializers import (
    ActivationSerializer,
    CustomerCreateRequestSerializer,
    CustomerSerializer,
    IssuedLicenseSerializer,
    IssueLicenseRequestSerializer,
    LicenseListQuerySerializer,
    LicenseSerializer,
    ReleaseServerActivationsResponseSerializer,
    UpdateLicenseRequestSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from customers.application.commands.create_customer import CreateCustomerCommand
from customers.application.handlers.create_customer_handler import CreateCustomerHandler
from customers.application.handlers.customer_query_handlers import (
    GetCustomerHandler,
    ListCustomersHandler,
)
from customers.application.queries.get_customer import GetCustomerQuery, ListCustomersQuery
from customers.infrastructure.repositories.django_customer_repository import (
    DjangoCustomerRepository,
)
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.reissue_license import ReissueLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    DeleteLicenseHandler,
    ReissueLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.license_query_handlers import (
    GetLicenseHandler,
    ListLicensesHandler,
)
from licenses.application.queries.get_license import GetLicenseQuery, ListLicensesQuery
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Initialize repositories (in production, use DI container)
_customer_repo = DjangoCustomerRepository()
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()

tracer = get_tracer(__name__)

COMMON_ERRORS = {
    400: {"description": "Bad Request"},
    401: {"description": "Unauthorized - Missing or invalid API key"},
}
NOT_FOUND = {404: {"description": "Not Found"}}


def _validated(serializer, span) -> dict:
    """Validate a serializer, marking the span when the payload is rejected."""
    if not serializer.is_valid():
        span.set_attribute("error", "validation_failed")
        span.set_attribute("error.details", str(serializer.errors))
        span.set_status(Status(StatusCode.ERROR, "Validation failed"))
        serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class CustomerListCreateView(APIView):
    """View for creating and listing customers."""

    @extend_schema(
        operation_id="create_customer",
        summary="Create Customer",
        tags=["Customers"],
        request=CustomerCreateRequestSerializer,
        responses={201: CustomerSerializer, **COMMON_ERRORS},
    )
    def post(self, request: Request) -> Response:
        """Create a customer."""
        return async_to_sync(self._handle_create)(request)

    async def _handle_create(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_customer") as span:
            data = _validated(CustomerCreateRequestSerializer(data=request.data), span)
            result = await CreateCustomerHandler(_customer_repo).handle(
                CreateCustomerCommand(
                    name=data["name"],
                    email=data["email"],
                    company=data.get("company"),
                )
            )
            span.set_attribute("customer.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(CustomerSerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="list_customers",
        summary="List Customers",
        tags=["Customers"],
        responses={200: CustomerSerializer(many=True), 401: COMMON_ERRORS[401]},
    )
    def get(self, request: Request) -> Response:
        """List customers."""
        result = async_to_sync(ListCustomersHandler(_customer_repo).handle)(ListCustomersQuery())
        return Response(CustomerSerializer(result, many=True).data)


class CustomerDetailView(APIView):
    """View for one customer."""

    @extend_schema(
        operation_id="get_customer",
        summary="Get Customer",
        tags=["Customers"],
        responses={200: CustomerSerializer, 401: COMMON_ERRORS[401], **NOT_FOUND},
    )
    def get(self, request: Request, customer_id: uuid.UUID) -> Response:
        """Get a customer."""
        result = async_to_sync(GetCustomerHandler(_customer_repo).handle)(
            GetCustomerQuery(customer_id=customer_id)
        )
        return Response(CustomerSerializer(result).data)


class LicenseListCreateView(APIView):
    """View for issuing and listing licenses."""

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description=(
            "Issue a new license key to an existing customer. The plaintext key is "
            "returned once in `licenseKey` and cannot be retrieved again. "
            "`maxActivations` of 0 means unlimited."
        ),
        tags=["Licenses"],
        request=IssueLicenseRequestSerializer,
        responses={201: IssuedLicenseSerializer, **COMMON_ERRORS},
    )
    def post(self, request: Request) -> Response:
        """Issue a license."""
        return async_to_sync(self._handle_issue)(request)

    async def _handle_issue(self, request: Request) -> Response:
        with tracer.start_as_current_span("issue_license") as span:
            span.set_attribute("operation", "issue_license")
            data = _validated(IssueLicenseRequestSerializer(data=request.data), span)
            span.set_attribute("customer.id", str(data["customer_id"]))
            span.set_attribute("max_activations", data["max_activations"])

            handler = IssueLicenseHandler(
                customer_repository=_customer_repo,
                license_repository=_license_repo,
            )
            result = await handler.handle(
                IssueLicenseCommand(
                    customer_id=data["customer_id"],
                    max_activations=data["max_activations"],
                    notes=data["notes"],
                )
            )

            span.set_attribute("license.id", str(result.license.id))
            span.set_status(Status(StatusCode.OK))
            return Response(IssuedLicenseSerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        tags=["Licenses"],
        parameters=[
            OpenApiParameter(
                name="customerId",
                type=uuid.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Only return licenses of this customer",
            )
        ],
        responses={200: LicenseSerializer(many=True), **COMMON_ERRORS},
    )
    def get(self, request: Request) -> Response:
        """List licenses, newest first."""
        query = LicenseListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = async_to_sync(ListLicensesHandler(_license_repo).handle)(
            ListLicensesQuery(customer_id=query.validated_data.get("customer_id"))
        )
        return Response(LicenseSerializer(result, many=True).data)


class LicenseDetailView(APIView):
    """View for reading, updating and deleting one license."""

    @extend_schema(
        operation_id="get_license",
        summary="Get License",
        tags=["Licenses"],
        responses={200: LicenseSerializer, 401: COMMON_ERRORS[401], **NOT_FOUND},
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        """Get a license."""
        result = async_to_sync(GetLicenseHandler(_license_repo).handle)(
            GetLicenseQuery(license_id=license_id)
        )
        return Response(LicenseSerializer(result).data)

    @extend_schema(
        operation_id="update_license",
        summary="Update License",
        description=(
            "Partially update a license. `status` follows active <-> suspended and "
            "active|suspended -> revoked; revoked is final. Suspending or revoking "
            "blocks new activations but keeps existing ones. `maxActivations` may not "
            "drop below the number of active activations unless set to 0 (unlimited)."
        ),
        tags=["Licenses"],
        request=UpdateLicenseRequestSerializer,
        responses={200: LicenseSerializer, **COMMON_ERRORS, **NOT_FOUND},
    )
    def patch(self, request: Request, license_id: uuid.UUID) -> Response:
        """Update a license."""
        return async_to_sync(self._handle_update)(request, license_id)

    async def _handle_update(self, request: Request, license_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("update_license") as span:
            span.set_attribute("license.id", str(license_id))
            data = _validated(UpdateLicenseRequestSerializer(data=request.data), span)

            handler = UpdateLicenseHandler(license_repository=_license_repo)
            result = await handler.handle(
                UpdateLicenseCommand(
                    license_id=license_id,
                    status=data.get("status"),
                    notes=data.get("notes"),
                    max_activations=data.get("max_activations"),
                )
            )
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(result).data)

    @extend_schema(
        operation_id="delete_license",
        summary="Delete License",
        description="Delete a license together with all of its activations.",
        tags=["Licenses"],
        responses={204: None, 401: COMMON_ERRORS[401], **NOT_FOUND},
    )
    def delete(self, request: Request, license_id: uuid.UUID) -> Response:
        """Delete a license."""
        async_to_sync(DeleteLicenseHandler(_license_repo).handle)(
            DeleteLicenseCommand(license_id=license_id)
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class ReissueLicenseView(APIView):
    """View for rotating a license key."""

    @extend_schema(
        operation_id="reissue_license",
        summary="Reissue License Key",
        description=(
            "Replace the license key. The old key stops working immediately; "
            "existing activations stay active. The new key is returned once."
        ),
        tags=["Licenses"],
        request=None,
        responses={200: IssuedLicenseSerializer, 401: COMMON_ERRORS[401], **NOT_FOUND},
    )
    def post(self, request: Request, license_id: uuid.UUID) -> Response:
        """Reissue a license key."""
        return async_to_sync(self._handle_reissue)(license_id)

    async def _handle_reissue(self, license_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("reissue_license") as span:
            span.set_attribute("license.id", str(license_id))
            result = await ReissueLicenseHandler(_license_repo).handle(
                ReissueLicenseCommand(license_id=license_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(IssuedLicenseSerializer(result).data)


class LicenseActivationsView(APIView):
    """View for listing the activations of a license."""

    @extend_schema(
        operation_id="list_license_activations",
        summary="List License Activations",
        description="Active and released activations of a license, newest first.",
        tags=["Activations"],
        responses={200: ActivationSerializer(many=True), 401: COMMON_ERRORS[401], **NOT_FOUND},
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        """List activations of a license."""
        handler = ListActivationsHandler(
            license_repository=_license_repo,
            activation_repository=_activation_repo,
        )
        result = async_to_sync(handler.handle)(ListActivationsQuery(license_id=license_id))
        return Response(ActivationSerializer(result, many=True).data)


class ReleaseActivationView(APIView):
    """View for releasing one activation."""

    @extend_schema(
        operation_id="release_activation",
        summary="Release Activation",
        description="Free the slot held by an activation. Released activations are kept as history.",
        tags=["Activations"],
        request=None,
        responses={200: ActivationSerializer, 401: COMMON_ERRORS[401], **NOT_FOUND},
    )
    def post(self, request: Request, license_id: uuid.UUID, activation_id: uuid.UUID) -> Response:
        """Release an activation."""
        return async_to_sync(self._handle_release)(license_id, activation_id)

    async def _handle_release(self, license_id: uuid.UUID, activation_id: uuid.UUID) -> Response:
        with tracer.start_as_current_span("release_activation") as span:
            span.set_attribute("license.id", str(license_id))
            span.set_attribute("activation.id", str(activation_id))
            result = await ReleaseActivationHandler(_activation_repo).handle(
                ReleaseActivationCommand(license_id=license_id, activation_id=activation_id)
            )
            span.set_status(Status(StatusCode.OK))
            return Response(ActivationSerializer(result).data)


class ReleaseServerActivationsView(APIView):
    """View for releasing every activation of an external server."""

    @extend_schema(
        operation_id="release_server_activations",
        summary="Release Server Activations",
        description="Release all active activations tagged with this server id, on every license.",
        tags=["Activations"],
        request=None,
        responses={200: ReleaseServerActivationsResponseSerializer, 401: COMMON_ERRORS[401]},
    )
    def post(self, request: Request, server_id: str) -> Response:
        """Release activations of a server."""
        return async_to_sync(self._handle_release)(server_id)

    async def _handle_release(self, server_id: str) -> Response:
        with tracer.start_as_current_span("release_server_activations") as span:
            span.set_attribute("server.id", server_id)
            released = await ReleaseServerActivationsHandler(_activation_repo).handle(
                ReleaseServerActivationsCommand(server_id=server_id)
            )
            span.set_attribute("released", released)
            span.set_status(Status(StatusCode.OK))
            return Response(ReleaseServerActivationsResponseSerializer({"released": released}).data)
