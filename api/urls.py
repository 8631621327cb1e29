"""
api/urls.py
===========
URL configuration for the fault diagnosis REST API.

Mounted at the site root by the project-level router.  Paths carry no
trailing slash so clients can POST to ``/diagnose/forward`` directly.
"""

from django.urls import path

from . import views

app_name = "api"

urlpatterns = [
    path(
        "",
        views.ServiceRootAPIView.as_view(),
        name="root",
    ),
    path(
        "test",
        views.HealthCheckAPIView.as_view(),
        name="health",
    ),
    path(
        "rules",
        views.RuleListAPIView.as_view(),
        name="rule-list",
    ),
    path(
        "rules/records",
        views.RuleRecordListAPIView.as_view(),
        name="rule-record-list",
    ),
    path(
        "diagnose/forward",
        views.ForwardDiagnosisAPIView.as_view(),
        name="diagnose-forward",
    ),
    path(
        "diagnose/backward",
        views.BackwardDiagnosisAPIView.as_view(),
        name="diagnose-backward",
    ),
]
