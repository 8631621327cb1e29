"""
URL configuration for the faultdiag project.

Routes:
    /admin/             → Django Admin (stored rules)
    /                   → REST API (api app): /rules, /diagnose/forward,
                          /diagnose/backward, /test
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Django Admin
    path("admin/", admin.site.urls),
    # REST API (DRF)
    path("", include("api.urls", namespace="api")),
]
