"""
URL configuration for operator API endpoints.
"""

from django.urls import path

from api.v1.operator import views

urlpatterns = [
    path("customers", views.CustomerListCreateView.as_view(), name="customers"),
    path(
        "customers/<uuid:customer_id>",
        views.CustomerDetailView.as_view(),
        name="customer-detail",
    ),
    path("licenses", views.LicenseListCreateView.as_view(), name="licenses"),
    path(
        "licenses/<uuid:license_id>",
        views.LicenseDetailView.as_view(),
        name="license-detail",
    ),
    path(
        "licenses/<uuid:license_id>/reissue",
        views.ReissueLicenseView.as_view(),
        name="license-reissue",
    ),
    path(
        "licenses/<uuid:license_id>/activations",
        views.LicenseActivationsView.as_view(),
        name="license-activations",
    ),
    path(
        "licenses/<uuid:license_id>/activations/<uuid:activation_id>/release",
        views.ReleaseActivationView.as_view(),
        name="activation-release",
    ),
    path(
        "servers/<str:server_id>/release-activations",
        views.ReleaseServerActivationsView.as_view(),
        name="server-release-activations",
    ),
]
