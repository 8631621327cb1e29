"""
knowledge_base/models.py
========================
Database storage for the diagnostic rule sets.

Contains:
    - RuleModel: One IF-THEN rule belonging to either the forward or
      the backward rule set, with its position inside that set.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models


class RuleModel(models.Model):
    """A stored implication rule.

    Rows are read once, when the rule base is loaded with the
    ``database`` rule source; editing them afterwards only takes effect
    after a restart.

    Attributes:
        chain: Rule set this rule belongs to (forward / backward).
        position: Order of the rule inside its set.  Order decides the
            forward trace order and the backward rule-try order.
        antecedents: JSON list of facts that must all hold.  Empty means
            the consequent holds unconditionally.
        consequent: Fact asserted when the rule fires.
        description: Optional human-readable explanation.
    """

    class Chain(models.TextChoices):
        """Rule sets."""

        FORWARD = "FORWARD", "Forward"
        BACKWARD = "BACKWARD", "Backward"

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------
    chain: str = models.CharField(
        max_length=10,
        choices=Chain.choices,
        help_text="Rule set consumed by forward or backward chaining.",
    )
    position: int = models.PositiveIntegerField(
        default=0,
        help_text="Declared order of the rule within its set.",
    )
    antecedents = models.JSONField(
        default=list,
        blank=True,
        help_text='JSON list of required facts, e.g. ["battery_low", "old_battery"].',
    )
    consequent: str = models.CharField(
        max_length=200,
        help_text="Fact asserted when every antecedent holds.",
    )
    description: str = models.TextField(
        blank=True,
        default="",
        help_text="Optional explanation shown alongside the rule.",
    )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def clean(self) -> None:
        """Reject rules the inference engine would refuse to load."""
        super().clean()
        errors: dict[str, str] = {}
        if not self.consequent or not self.consequent.strip():
            errors["consequent"] = "A rule must have a non-empty consequent."
        if not isinstance(self.antecedents, list):
            errors["antecedents"] = "Antecedents must be a JSON list of facts."
        elif any(not isinstance(a, str) or not a.strip() for a in self.antecedents):
            errors["antecedents"] = "Every antecedent must be a non-empty string."
        if errors:
            raise ValidationError(errors)

    def to_rule_dict(self) -> dict:
        return {
            "antecedents": self.antecedents,
            "consequent": self.consequent,
            "description": self.description or None,
        }

    # ------------------------------------------------------------------
    # Meta
    # ------------------------------------------------------------------
    class Meta:
        ordering: list[str] = ["chain", "position", "id"]
        verbose_name: str = "Rule"
        verbose_name_plural: str = "Rules"
        indexes = [models.Index(fields=["chain", "position"], name="rule_chain_position_idx")]

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------
    def __str__(self) -> str:
        conditions: str = " AND ".join(self.antecedents or []) or "TRUE"
        return f"[{self.get_chain_display()} #{self.position}] {conditions} → {self.consequent}"
