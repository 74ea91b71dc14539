"""
Django admin configuration for customers app.
"""

from django.contrib import admin

from customers.infrastructure.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer model."""

    list_display = ["name", "email", "company", "created_at"]
    search_fields = ["name", "email", "company"]
    readonly_fields = ["id", "created_at", "updated_at"]
