"""
URL configuration for the remote-script API.
"""

from django.urls import path

from api.v1.client import views

urlpatterns = [
    path("activate", views.ActivateLicenseView.as_view(), name="activate"),
]
