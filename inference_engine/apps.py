"""
inference_engine/apps.py
========================
Django app configuration for the inference engine.

Owns the process-wide :class:`RuleBase`: loaded once, never mutated,
shared read-only by every request.
"""

from __future__ import annotations

import threading

from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured


class InferenceEngineConfig(AppConfig):
    """Configuration for the ``inference_engine`` application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "inference_engine"
    verbose_name = "Inference Engine"

    def __init__(self, app_name, app_module):
        super().__init__(app_name, app_module)
        self._rule_base = None
        self._lock = threading.Lock()

    def ready(self) -> None:
        from .services.knowledge_base_repository import diagnosis_settings

        # no queries are allowed here, so the database source loads on first use
        if diagnosis_settings()["RULE_SOURCE"] != "database":
            self.get_rule_base()

    def get_rule_base(self):
        if self._rule_base is None:
            with self._lock:
                if self._rule_base is None:
                    self._rule_base = self._load()
        return self._rule_base

    def _load(self):
        from .services.exceptions import InvalidRuleError
        from .services.knowledge_base_repository import KnowledgeBaseRepository

        try:
            return KnowledgeBaseRepository().load_rule_base()
        except InvalidRuleError as exc:
            raise ImproperlyConfigured(f"Invalid rule base: {exc.message}") from exc
