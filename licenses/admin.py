"""
Django admin configuration for licenses app.

Keys, caps and counters are read-only here; they only change through
the operator API, which takes the license row lock.
"""
import json

from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import AuditLog, License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "id",
        "customer",
        "key_hint_display",
        "status_display",
        "max_activations",
        "activation_count",
        "last_activated_at",
        "created_at",
    ]
    list_filter = ["status", "created_at"]
    search_fields = ["id", "key_hint", "customer__name", "customer__email", "notes"]
    readonly_fields = [
        "id",
        "customer",
        "key_hash",
        "key_hint",
        "max_activations",
        "activation_count",
        "last_activated_at",
        "last_activated_ip",
        "last_activated_hostname",
        "created_at",
        "updated_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "customer", "status", "notes"),
            },
        ),
        (
            "Key",
            {
                "fields": ("key_hint", "key_hash"),
            },
        ),
        (
            "Capacity",
            {
                "fields": ("max_activations", "activation_count"),
            },
        ),
        (
            "Last Activation",
            {
                "fields": (
                    "last_activated_at",
                    "last_activated_ip",
                    "last_activated_hostname",
                ),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def key_hint_display(self, obj):
        """Display the last characters of the key."""
        return f"…{obj.key_hint}"

    key_hint_display.short_description = "Key"

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "active": "green",
            "suspended": "orange",
            "revoked": "red",
        }
        color = colors.get(obj.status, "black")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.status.upper(),
        )

    status_display.short_description = "Status"

    def has_add_permission(self, request):
        """Licenses are issued through the API so the key is shown exactly once."""
        return False

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("customer")


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Admin interface for AuditLog model."""

    list_display = ["action", "entity_type", "entity_id", "actor", "created_at"]
    list_filter = ["action", "entity_type", "created_at"]
    search_fields = ["actor", "entity_id"]
    readonly_fields = ["id", "created_at", "changes_display"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "entity_type", "entity_id", "action"),
            },
        ),
        (
            "Details",
            {
                "fields": ("actor", "changes_display", "created_at"),
            },
        ),
    )

    def changes_display(self, obj):
        """Display changes in a formatted way."""
        if obj.changes:
            return format_html(
                '<pre style="background: #f5f5f5; padding: 10px; '
                'border-radius: 4px; overflow-x: auto;">{}</pre>',
                json.dumps(obj.changes, indent=2),
            )
        return "-"

    changes_display.short_description = "Changes"

    def has_add_permission(self, request):
        """Audit logs are read-only."""
        return False

    def has_change_permission(self, request, obj=None):
        """Audit logs are read-only."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Audit logs should not be deleted."""
        return False
