"""
inference_engine/services/rule_base.py
======================================
Immutable rule representation shared by every inference strategy.

Contains:
    - Rule: A single IF-THEN implication over ground facts.
    - RuleBase: The forward and backward rule sets plus the fault prefix.
    - is_fault: Classifies a fact by its identifier prefix.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import InvalidRuleError

DEFAULT_FAULT_PREFIX: str = "fault_"


def is_fault(fact: str, prefix: str = DEFAULT_FAULT_PREFIX) -> bool:
    """Return ``True`` when ``fact`` names a fault under ``prefix``."""
    return fact.startswith(prefix)


@dataclass(frozen=True)
class Rule:
    """An implication ``antecedents[0] AND ... AND antecedents[n] -> consequent``.

    Attributes:
        antecedents: Facts required (conjunctively) for the rule to fire.
            An empty tuple means the consequent holds unconditionally.
        consequent: The fact asserted when the rule fires.
        description: Optional human-readable explanation of the rule.
    """

    antecedents: tuple[str, ...]
    consequent: str
    description: str | None = None

    @classmethod
    def from_dict(cls, data: Any, *, label: str = "rule") -> Rule:
        """Build a validated rule from its wire representation.

        Args:
            data: Mapping with ``antecedents``, ``consequent`` and an
                optional ``description``.
            label: Location of the rule, used in error messages
                (e.g. ``"forward_rules[3]"``).

        Raises:
            InvalidRuleError: If the payload is not a well-formed rule.
        """
        if not isinstance(data, Mapping):
            raise InvalidRuleError(
                f"{label}: expected an object, got {type(data).__name__}.",
                details={"rule": label},
            )

        consequent = data.get("consequent")
        if not isinstance(consequent, str) or not consequent.strip():
            raise InvalidRuleError(
                f"{label}: consequent must be a non-empty string.",
                details={"rule": label, "consequent": consequent},
            )

        antecedents = data.get("antecedents", [])
        if antecedents is None:
            antecedents = []
        if not isinstance(antecedents, (list, tuple)):
            raise InvalidRuleError(
                f"{label}: antecedents must be an array of facts.",
                details={"rule": label, "antecedents": antecedents},
            )
        for index, antecedent in enumerate(antecedents):
            if not isinstance(antecedent, str) or not antecedent.strip():
                raise InvalidRuleError(
                    f"{label}: antecedent #{index} must be a non-empty string.",
                    details={"rule": label, "antecedent": antecedent},
                )

        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise InvalidRuleError(
                f"{label}: description must be a string.",
                details={"rule": label},
            )

        return cls(
            antecedents=tuple(a.strip() for a in antecedents),
            consequent=consequent.strip(),
            description=description or None,
        )

    def to_dict(self) -> dict:
        payload: dict = {
            "antecedents": list(self.antecedents),
            "consequent": self.consequent,
        }
        if self.description:
            payload["description"] = self.description
        return payload

    def __str__(self) -> str:
        conditions: str = " AND ".join(self.antecedents) or "TRUE"
        return f"{conditions} -> {self.consequent}"


@dataclass(frozen=True)
class RuleBase:
    """The process-wide knowledge base.

    Holds two independent rule sequences, one consumed by forward
    chaining and one by backward chaining. Declared order matters: it
    fixes the trace order of forward chaining and the order in which
    backward chaining tries alternative rules.
    """

    forward: tuple[Rule, ...] = ()
    backward: tuple[Rule, ...] = ()
    fault_prefix: str = DEFAULT_FAULT_PREFIX
    _backward_index: dict[str, tuple[Rule, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.fault_prefix, str) or not self.fault_prefix:
            raise InvalidRuleError(
                "fault_prefix must be a non-empty string.",
                details={"fault_prefix": self.fault_prefix},
            )
        index: dict[str, list[Rule]] = {}
        for rule in self.backward:
            index.setdefault(rule.consequent, []).append(rule)
        object.__setattr__(
            self,
            "_backward_index",
            {goal: tuple(rules) for goal, rules in index.items()},
        )

    @classmethod
    def from_dict(cls, data: Any) -> RuleBase:
        """Build a validated rule base from its serialised form.

        Accepts ``forward_rules`` / ``backward_rules`` and, for either
        set that is missing, falls back to a shared ``rules`` list.

        Raises:
            InvalidRuleError: On the first malformed rule or field.
        """
        if not isinstance(data, Mapping):
            raise InvalidRuleError(
                "rule base must be an object with forward_rules and backward_rules."
            )

        shared = data.get("rules", [])
        rule_sets: dict[str, tuple[Rule, ...]] = {}
        for key in ("forward_rules", "backward_rules"):
            raw = data.get(key, shared)
            if not isinstance(raw, (list, tuple)):
                raise InvalidRuleError(
                    f"{key} must be an array of rules.",
                    details={"rule_set": key},
                )
            rule_sets[key] = tuple(
                Rule.from_dict(item, label=f"{key}[{index}]")
                for index, item in enumerate(raw)
            )

        return cls(
            forward=rule_sets["forward_rules"],
            backward=rule_sets["backward_rules"],
            fault_prefix=data.get("fault_prefix", DEFAULT_FAULT_PREFIX),
        )

    def is_fault(self, fact: str) -> bool:
        return is_fault(fact, self.fault_prefix)

    def rules_concluding(self, goal: str) -> tuple[Rule, ...]:
        """Backward rules whose consequent is ``goal``, in declared order."""
        return self._backward_index.get(goal, ())

    def to_dict(self) -> dict:
        return {
            "forward_rules": [rule.to_dict() for rule in self.forward],
            "backward_rules": [rule.to_dict() for rule in self.backward],
            "fault_prefix": self.fault_prefix,
        }
