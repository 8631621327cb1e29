"""
api/apps.py
===========
Django app configuration for the diagnosis HTTP boundary.
"""

from django.apps import AppConfig


class ApiConfig(AppConfig):
    """Configuration for the ``api`` application (no models)."""

    name = "api"
    verbose_name = "Diagnosis API"
