"""
Customer Django ORM model.

Domain entities are in customers.domain.customer.
"""
import uuid

from django.db import models


class Customer(models.Model):
    """
    A customer that licenses are issued to.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(db_index=True)
    company = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} <{self.email}>"
