"""
LicenseActivation Django ORM model.

This is the infrastructure layer model for activations.
Domain entities are in activations.domain.activation.
"""
import uuid

from django.db import models


class LicenseActivation(models.Model):
    """
    One machine holding a slot of a license.
    Released rows are kept as history.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("released", "Released"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.CASCADE,
        related_name="activations",
    )
    server_id = models.CharField(
        max_length=255, null=True, blank=True, db_index=True,
        help_text="Reference to an externally managed server",
    )
    server_ip = models.GenericIPAddressField()
    hostname = models.CharField(max_length=255, default="unknown")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    activated_at = models.DateTimeField()
    released_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "license_activations"
        ordering = ["-activated_at"]
        indexes = [
            models.Index(fields=["license", "server_ip", "status"]),
            models.Index(fields=["license", "status"]),
        ]

    def __str__(self):
        return f"{self.server_ip} ({self.status})"
