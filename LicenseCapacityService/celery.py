"""
Celery configuration for background tasks.

Used for periodic maintenance such as activation count reconciliation.
"""
import os

from celery import Celery

# Set default Django settings module
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseCapacityService.settings.base")

app = Celery("LicenseCapacityService")

# Load configuration from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()
