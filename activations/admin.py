"""
Django admin configuration for activations app.
"""

from django.contrib import admin
from django.utils.html import format_html

from activations.infrastructure.models import LicenseActivation


@admin.register(LicenseActivation)
class LicenseActivationAdmin(admin.ModelAdmin):
    """Read-only admin interface for LicenseActivation model."""

    list_display = [
        "license",
        "server_ip",
        "hostname",
        "server_id",
        "status_display",
        "activated_at",
        "released_at",
    ]
    list_filter = ["status", "activated_at", "released_at"]
    search_fields = ["server_ip", "hostname", "server_id", "license__id"]
    readonly_fields = [
        "id",
        "license",
        "server_id",
        "server_ip",
        "hostname",
        "status",
        "activated_at",
        "released_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "license", "status"),
            },
        ),
        (
            "Server",
            {
                "fields": ("server_ip", "hostname", "server_id"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("activated_at", "released_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display active status with color."""
        if obj.status == "active":
            return format_html('<span style="color: green; font-weight: bold;">✓ Active</span>')
        return format_html('<span style="color: gray; font-weight: bold;">Released</span>')

    status_display.short_description = "Status"

    def has_add_permission(self, request):
        """Slots are only taken through the activation endpoint."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Deleting a row would desync the cached activation count."""
        return False

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license")
