"""
inference_engine/services/results.py
====================================
Result types produced by the inference strategies.

Contains:
    - TraceEntry: One rule firing during forward chaining.
    - ForwardResult: Closure, faults and trace of a forward run.
    - ProofNode: One step of a backward proof tree.
    - ProofResult: Outcome of a backward proof attempt.
"""

from __future__ import annotations

from dataclasses import dataclass

from .rule_base import Rule


@dataclass(frozen=True)
class TraceEntry:
    antecedents: tuple[str, ...]
    consequent: str
    description: str | None = None

    @classmethod
    def from_rule(cls, rule: Rule) -> TraceEntry:
        return cls(
            antecedents=rule.antecedents,
            consequent=rule.consequent,
            description=rule.description,
        )

    def to_dict(self) -> dict:
        return Rule(self.antecedents, self.consequent, self.description).to_dict()


@dataclass(frozen=True)
class ForwardResult:
    """Outcome of forward chaining.

    Attributes:
        input_facts: The facts the run started from.
        derived_facts: Facts asserted by the run (input facts excluded).
        faults: The subset of ``derived_facts`` carrying the fault prefix.
        trace: Rule firings in the order they happened.
        passes: Number of passes over the rule set, the final
            no-change pass included.
    """

    input_facts: frozenset[str]
    derived_facts: frozenset[str]
    faults: frozenset[str]
    trace: tuple[TraceEntry, ...]
    passes: int

    @property
    def known_facts(self) -> frozenset[str]:
        return self.input_facts | self.derived_facts

    def to_dict(self) -> dict:
        return {
            "input_facts": sorted(self.input_facts),
            "derived_facts": sorted(self.derived_facts),
            "faults": sorted(self.faults),
            "trace": [entry.to_dict() for entry in self.trace],
        }


@dataclass(frozen=True)
class ProofNode:
    """A proved goal.

    ``rule`` is ``None`` for a leaf, i.e. a goal found directly in the
    input facts. Otherwise ``subproofs`` holds one node per antecedent
    of ``rule``, in antecedent order.
    """

    goal: str
    rule: Rule | None = None
    subproofs: tuple[ProofNode, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return self.rule is None

    def rules_used(self) -> list[Rule]:
        """Rules applied in this proof, children before parents."""
        rules: list[Rule] = []
        for subproof in self.subproofs:
            rules.extend(subproof.rules_used())
        if self.rule is not None:
            rules.append(self.rule)
        return rules

    def depth(self) -> int:
        return 1 + max((s.depth() for s in self.subproofs), default=0)

    def to_dict(self) -> dict:
        payload: dict = {"goal": self.goal}
        if self.rule is not None:
            payload["rule"] = self.rule.to_dict()
        payload["subproofs"] = [s.to_dict() for s in self.subproofs]
        return payload


@dataclass(frozen=True)
class ProofResult:
    goal: str
    provable: bool
    proof: ProofNode | None = None

    def to_dict(self) -> dict:
        return {
            "goal": self.goal,
            "provable": self.provable,
            "proof": self.proof.to_dict() if self.proof is not None else None,
        }
