"""
api/serializers.py
==================
DRF serializers for the fault diagnosis REST API.

Contains:
    - RuleSerializer: Wire form of an in-memory :class:`Rule`.
    - RuleBaseSerializer: Both rule sets plus the fault prefix.
    - RuleRecordSerializer: Read-only representation of stored rules.
    - ForwardDiagnosisRequestSerializer: Input validation for forward chaining.
    - BackwardDiagnosisRequestSerializer: Input validation for backward chaining.
"""

from __future__ import annotations

from rest_framework import serializers

from knowledge_base.models import RuleModel


class FactField(serializers.CharField):
    """A fact identifier.

    Unlike :class:`CharField` it does not coerce numbers or booleans
    into strings: anything but a JSON string is rejected.
    """

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


# ─────────────────────────────────────────────────────────────────────
# Read-only serializers
# ─────────────────────────────────────────────────────────────────────


class RuleSerializer(serializers.Serializer):
    """Serializer for :class:`Rule` and :class:`TraceEntry` values.

    ``description`` is omitted when the rule has none.
    """

    antecedents = serializers.ListField(child=serializers.CharField(), read_only=True)
    consequent = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True, allow_null=True)

    def to_representation(self, instance) -> dict:
        data: dict = super().to_representation(instance)
        if not data.get("description"):
            data.pop("description", None)
        return data


class RuleBaseSerializer(serializers.Serializer):
    """Serializer for the loaded :class:`RuleBase`."""

    forward_rules = RuleSerializer(source="forward", many=True, read_only=True)
    backward_rules = RuleSerializer(source="backward", many=True, read_only=True)
    fault_prefix = serializers.CharField(read_only=True)


class RuleRecordSerializer(serializers.ModelSerializer):
    """Serializer for :class:`RuleModel` rows."""

    chain_display = serializers.CharField(
        source="get_chain_display",
        read_only=True,
    )

    class Meta:
        model = RuleModel
        fields = [
            "id",
            "chain",
            "chain_display",
            "position",
            "antecedents",
            "consequent",
            "description",
        ]
        read_only_fields = fields


# ─────────────────────────────────────────────────────────────────────
# Input serializers
# ─────────────────────────────────────────────────────────────────────


class ForwardDiagnosisRequestSerializer(serializers.Serializer):
    """Input validation for the forward diagnosis endpoint.

    ``facts`` is required and must be a list of strings.  Surrounding
    whitespace is trimmed; blank entries and duplicates are dropped.
    An empty list is valid.
    """

    facts = serializers.ListField(
        child=FactField(allow_blank=True),
        allow_empty=True,
        help_text="Observed facts, e.g. [\"battery_low\", \"no_wifi\"].",
    )

    def validate_facts(self, value: list[str]) -> list[str]:
        return sorted({fact for fact in value if fact})


class BackwardDiagnosisRequestSerializer(ForwardDiagnosisRequestSerializer):
    """Input validation for the backward diagnosis endpoint."""

    goal = FactField(
        help_text="Fact to prove, e.g. \"fault_power_supply\".",
    )
