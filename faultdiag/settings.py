"""
Django settings for the faultdiag project.

Every deployment-specific value is read from the environment so the
same settings module serves development, tests and production.
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR: Path = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    value: str | None = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# ─────────────────────────────────────────────────────────────────────
# Core
# ─────────────────────────────────────────────────────────────────────

SECRET_KEY: str = os.environ.get(
    "DJANGO_SECRET_KEY",
    "django-insecure-faultdiag-development-key",
)
DEBUG: bool = _env_bool("DJANGO_DEBUG", True)
ALLOWED_HOSTS: list[str] = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]

INSTALLED_APPS: list[str] = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # third party
    "rest_framework",
    "django_filters",
    # local
    "knowledge_base",
    "inference_engine",
    "api",
]

MIDDLEWARE: list[str] = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF: str = "faultdiag.urls"
WSGI_APPLICATION: str = "faultdiag.wsgi.application"

TEMPLATES: list[dict] = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

DATABASES: dict = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD: str = "django.db.models.BigAutoField"

LANGUAGE_CODE: str = "en-us"
TIME_ZONE: str = "UTC"
USE_I18N: bool = True
USE_TZ: bool = True

STATIC_URL: str = "static/"

# ─────────────────────────────────────────────────────────────────────
# Django REST Framework
# ─────────────────────────────────────────────────────────────────────

REST_FRAMEWORK: dict = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "DEFAULT_FILTER_BACKENDS": ["django_filters.rest_framework.DjangoFilterBackend"],
    # the diagnosis endpoints are public and stateless
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# ─────────────────────────────────────────────────────────────────────
# Fault diagnosis engine
# ─────────────────────────────────────────────────────────────────────

FAULT_DIAGNOSIS: dict = {
    # "static" (built-in rules), "file" (JSON at RULES_FILE) or "database"
    "RULE_SOURCE": os.environ.get("FAULT_DIAGNOSIS_RULE_SOURCE", "static"),
    "RULES_FILE": os.environ.get("FAULT_DIAGNOSIS_RULES_FILE") or None,
    "FAULT_PREFIX": os.environ.get("FAULT_DIAGNOSIS_FAULT_PREFIX", "fault_"),
    "MAX_PROOF_DEPTH": int(os.environ.get("FAULT_DIAGNOSIS_MAX_PROOF_DEPTH", "200")),
    "MAX_PROOF_STEPS": int(os.environ.get("FAULT_DIAGNOSIS_MAX_PROOF_STEPS", "100000")),
}

# ─────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────

LOG_LEVEL: str = os.environ.get("DJANGO_LOG_LEVEL", "INFO").upper()

LOGGING: dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        # application loggers propagate to the root console handler
        "inference_engine": {"level": LOG_LEVEL},
        "knowledge_base": {"level": LOG_LEVEL},
        "api": {"level": LOG_LEVEL},
    },
}
