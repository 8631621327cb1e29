"""
inference_engine/services/knowledge_base_repository.py
=====================================================
Repository layer that loads the rule base from its configured source.

All access to rule storage (built-in defaults, JSON rule files and
the ``RuleModel`` table) is centralised here so strategies only ever
see a validated, immutable :class:`RuleBase`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from django.apps import apps
from django.conf import settings
from django.db import DatabaseError
from django.db.models import QuerySet

from knowledge_base.defaults import FAULT_PREFIX, default_rule_data
from knowledge_base.models import RuleModel

from .exceptions import InvalidRuleError
from .rule_base import RuleBase

logger: logging.Logger = logging.getLogger(__name__)

RULE_SOURCES: tuple[str, ...] = ("static", "file", "database")


def diagnosis_settings() -> dict:
    """Return the ``FAULT_DIAGNOSIS`` settings with defaults filled in."""
    configured: dict = getattr(settings, "FAULT_DIAGNOSIS", {}) or {}
    return {
        "RULE_SOURCE": "static",
        "RULES_FILE": None,
        "FAULT_PREFIX": FAULT_PREFIX,
        "MAX_PROOF_DEPTH": 200,
        "MAX_PROOF_STEPS": 100_000,
        **configured,
    }


def get_rule_base() -> RuleBase:
    """Return the process-wide rule base, loading it on first use."""
    return apps.get_app_config("inference_engine").get_rule_base()


class KnowledgeBaseRepository:
    """Loads and validates rule sets from the configured source.

    Sources (``FAULT_DIAGNOSIS["RULE_SOURCE"]``):
        - ``static``: the built-in rule sets in :mod:`knowledge_base.defaults`.
        - ``file``: a JSON document at ``FAULT_DIAGNOSIS["RULES_FILE"]``.
        - ``database``: the :class:`RuleModel` table.
    """

    def __init__(self, config: dict | None = None) -> None:
        self.config: dict = config if config is not None else diagnosis_settings()

    @property
    def source(self) -> str:
        return self.config["RULE_SOURCE"]

    def load_rule_base(self) -> RuleBase:
        """Load and validate the rule base.

        Returns:
            The validated :class:`RuleBase`.

        Raises:
            InvalidRuleError: On an unknown source, an unreadable or
                malformed rule file, a database error, or any invalid rule.
        """
        if self.source == "static":
            data: dict = default_rule_data(self.config["FAULT_PREFIX"])
        elif self.source == "file":
            data = self._read_rules_file()
        elif self.source == "database":
            data = self._read_rule_records()
        else:
            raise InvalidRuleError(
                f"Unknown rule source {self.source!r}; expected one of {RULE_SOURCES}.",
                details={"rule_source": self.source},
            )

        rule_base: RuleBase = RuleBase.from_dict(data)
        logger.info(
            "loaded rule base from %s source: %d forward rules, %d backward rules, fault prefix %r",
            self.source,
            len(rule_base.forward),
            len(rule_base.backward),
            rule_base.fault_prefix,
        )
        return rule_base

    def get_rule_records(self, chain: str) -> QuerySet[RuleModel]:
        """Return the stored rules of one chain in declared order.

        Args:
            chain: A :class:`RuleModel.Chain` value.
        """
        return RuleModel.objects.filter(chain=chain).order_by("position", "id")

    def _read_rules_file(self) -> dict:
        path_setting = self.config.get("RULES_FILE")
        if not path_setting:
            raise InvalidRuleError(
                "RULES_FILE must be set when RULE_SOURCE is 'file'.",
                details={"rule_source": "file"},
            )

        path: Path = Path(path_setting)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise InvalidRuleError(
                f"Cannot read rules file {path}: {exc}",
                details={"rules_file": str(path)},
            ) from exc
        except json.JSONDecodeError as exc:
            raise InvalidRuleError(
                f"Rules file {path} is not valid JSON: {exc}",
                details={"rules_file": str(path)},
            ) from exc

        if isinstance(data, dict):
            data.setdefault("fault_prefix", self.config["FAULT_PREFIX"])
        return data

    def _read_rule_records(self) -> dict:
        try:
            forward: list[dict] = [
                record.to_rule_dict()
                for record in self.get_rule_records(RuleModel.Chain.FORWARD)
            ]
            backward: list[dict] = [
                record.to_rule_dict()
                for record in self.get_rule_records(RuleModel.Chain.BACKWARD)
            ]
        except DatabaseError as exc:
            logger.exception("database error while loading rules")
            raise InvalidRuleError(
                "Database error while loading the rule base.",
                details={"original_error": str(exc)},
            ) from exc

        if not forward and not backward:
            logger.warning("rule table is empty; run `manage.py seed_data` to load the defaults")

        return {
            "forward_rules": forward,
            "backward_rules": backward,
            "fault_prefix": self.config["FAULT_PREFIX"],
        }
