"""
License and AuditLog models.
"""
import uuid

from django.db import models


class License(models.Model):
    """
    A license issued to a customer.

    Only the SHA-256 hash of the key is stored. ``activation_count`` mirrors
    the number of active rows in ``license_activations`` and is written by
    the activation repository while it holds this row locked.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("suspended", "Suspended"),
        ("revoked", "Revoked"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        "customers.Customer", on_delete=models.CASCADE, related_name="licenses"
    )
    key_hash = models.CharField(
        max_length=64, unique=True, help_text="SHA-256 of the license key"
    )
    key_hint = models.CharField(max_length=8, help_text="Last characters of the key")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    max_activations = models.PositiveIntegerField(
        default=0, help_text="Maximum concurrent activations, 0 for unlimited"
    )
    activation_count = models.PositiveIntegerField(default=0)
    last_activated_at = models.DateTimeField(null=True, blank=True)
    last_activated_ip = models.GenericIPAddressField(null=True, blank=True)
    last_activated_hostname = models.CharField(max_length=255, null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "status"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self):
        return f"****{self.key_hint} ({self.status})"


class AuditLog(models.Model):
    """
    Immutable audit trail of license, activation and customer changes.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64)
    action = models.CharField(max_length=50)
    changes = models.JSONField(default=dict, help_text="Details of the change")
    actor = models.CharField(max_length=255, help_text="Who performed the action")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["created_at"]),
            models.Index(fields=["action"]),
        ]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"
