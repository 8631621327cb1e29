"""
inference_engine/services/backward_chaining.py
==============================================
Goal-driven **backward chaining** inference strategy.

Algorithm:
    1. Start from a *goal* fact the caller wants to verify.
    2. A goal present in the observed facts is proved outright.
    3. Otherwise try each backward rule concluding the goal, in
       declared order, proving its antecedents recursively.
    4. The first rule whose antecedents are all proved yields the proof;
       a failed antecedent abandons the rule and moves on to the next.
    5. Goals already being proved higher up the current path are
       treated as failures, so cyclic rules cannot loop.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterable
from typing import Any

from .base_strategy import InferenceStrategy
from .exceptions import SearchLimitExceededError
from .results import ProofNode, ProofResult
from .rule_base import RuleBase

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH: int = 200
DEFAULT_MAX_STEPS: int = 100_000

# each nested goal costs one interpreter frame during the search and
# a few more when the proof tree is serialised
FRAMES_PER_DEPTH: int = 4


def depth_ceiling() -> int:
    """Deepest proof the interpreter's recursion limit can carry."""
    return sys.getrecursionlimit() // FRAMES_PER_DEPTH


class _ProofSearch:
    """Working state of one :meth:`BackwardChainingStrategy.prove` call.

    Never shared between calls.
    """

    def __init__(
        self,
        rule_base: RuleBase,
        facts: frozenset[str],
        root_goal: str,
        max_depth: int,
        max_steps: int,
    ) -> None:
        self.rule_base: RuleBase = rule_base
        self.facts: frozenset[str] = facts
        self.root_goal: str = root_goal
        self.max_depth: int = max_depth
        self.max_steps: int = max_steps
        self.in_progress: set[str] = set()
        self.steps: int = 0

    def search(self, goal: str, depth: int = 1) -> ProofNode | None:
        """Prove ``goal``; ``None`` means no proof exists along this path."""
        if goal in self.facts:
            return ProofNode(goal=goal)

        # the goal is already being proved further up this path
        if goal in self.in_progress:
            logger.debug("cycle on %s, skipping", goal)
            return None

        self.steps += 1
        if depth > self.max_depth:
            raise SearchLimitExceededError(self.root_goal, "max_depth", self.max_depth)
        if self.steps > self.max_steps:
            raise SearchLimitExceededError(self.root_goal, "max_steps", self.max_steps)

        self.in_progress.add(goal)
        try:
            for rule in self.rule_base.rules_concluding(goal):
                subproofs: list[ProofNode] = []
                for antecedent in rule.antecedents:
                    subproof = self.search(antecedent, depth + 1)
                    if subproof is None:
                        break
                    subproofs.append(subproof)
                else:
                    return ProofNode(goal=goal, rule=rule, subproofs=tuple(subproofs))
                logger.debug("rule %s failed for %s, backtracking", rule, goal)
            return None
        finally:
            self.in_progress.discard(goal)


class BackwardChainingStrategy(InferenceStrategy):
    """Backward chaining: verify whether a *specific* fact is provable
    from the observed facts.

    Unlike forward chaining this strategy is **goal-driven**: the
    caller picks the hypothesis and the engine searches for a proof.
    The search runs against the literal observed facts, not their
    forward closure.
    """

    def __init__(
        self,
        rule_base: RuleBase,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_steps: int = DEFAULT_MAX_STEPS,
    ) -> None:
        super().__init__(rule_base)
        ceiling: int = depth_ceiling()
        if max_depth > ceiling:
            logger.warning(
                "max_depth %d exceeds the recursion ceiling, using %d",
                max_depth,
                ceiling,
            )
            max_depth = ceiling
        self.max_depth: int = max_depth
        self.max_steps: int = max_steps

    def prove(self, facts: Iterable[str], goal: str) -> ProofResult:
        """Search for a proof of ``goal``.

        Args:
            facts: Observed facts.  Never mutated.
            goal: The fact to prove.

        Returns:
            :class:`ProofResult` with the first proof found, or
            ``provable=False`` and no proof.

        Raises:
            SearchLimitExceededError: If the search exceeds
                ``max_depth`` nested goals or ``max_steps`` expansions.
        """
        search = _ProofSearch(
            rule_base=self.rule_base,
            facts=frozenset(facts),
            root_goal=goal,
            max_depth=self.max_depth,
            max_steps=self.max_steps,
        )
        try:
            proof: ProofNode | None = search.search(goal)
        except RecursionError as exc:
            raise SearchLimitExceededError(goal, "max_depth", self.max_depth) from exc
        logger.debug("proof search for %s expanded %d goals", goal, search.steps)
        return ProofResult(goal=goal, provable=proof is not None, proof=proof)

    def execute_inference(self, facts: frozenset[str], **kwargs: Any) -> dict:
        """Verify a goal against the observed facts.

        Args:
            facts: Observed facts.
            **kwargs:
                goal (str): **Required.** The fact to prove.

        Returns:
            Dict with structure::

                {
                    "strategy": "BACKWARD_CHAINING",
                    "goal": str,
                    "facts": [str, ...],
                    "provable": bool,
                    "proof": {
                        "goal": str,
                        "rule": {...},          # absent on leaves
                        "subproofs": [...],
                    } | None,
                    "execution_time_ms": int,
                }

        Raises:
            ValueError: If ``goal`` is not provided.
            SearchLimitExceededError: If the search guard trips.
        """
        goal: str | None = kwargs.get("goal")
        if not goal:
            raise ValueError("goal is required for backward chaining")

        start: float = time.perf_counter()
        try:
            result: ProofResult = self.prove(facts, goal)
        except SearchLimitExceededError as exc:
            logger.warning("backward chaining aborted: %s", exc.message)
            raise
        elapsed_ms: int = int((time.perf_counter() - start) * 1000)

        logger.info(
            "backward chaining complete for goal %s: provable=%s in %dms",
            goal,
            result.provable,
            elapsed_ms,
        )

        payload: dict = result.to_dict()
        payload.update(
            {
                "strategy": "BACKWARD_CHAINING",
                "facts": sorted(facts),
                "execution_time_ms": elapsed_ms,
            }
        )
        return payload

    def explain_result(self, result: dict) -> str:
        """Format a backward chaining result into a human-readable report.

        Args:
            result: Dict returned by :meth:`execute_inference`.

        Returns:
            Multi-line explanation string.
        """
        lines: list[str] = [
            "=== backward chaining verification report ===",
            f"goal: {result.get('goal', 'N/A')}",
            f"observed facts: {', '.join(result.get('facts', [])) or 'none'}",
            f"execution time: {result.get('execution_time_ms', 0)}ms",
            "",
        ]

        proof: dict | None = result.get("proof")
        if not result.get("provable") or proof is None:
            lines.append("goal is NOT provable from the observed facts")
            return "\n".join(lines)

        lines.append("goal is provable")
        lines.append("")
        lines.append("--- proof ---")
        self._render_node(proof, lines, indent=0)
        return "\n".join(lines)

    def _render_node(self, node: dict, lines: list[str], indent: int) -> None:
        pad: str = "  " * indent
        rule: dict | None = node.get("rule")
        if rule is None:
            lines.append(f"{pad}- {node['goal']} [observed]")
        else:
            conditions: str = " AND ".join(rule["antecedents"]) or "TRUE"
            line: str = f"{pad}- {node['goal']} <= {conditions}"
            if rule.get("description"):
                line += f" ({rule['description']})"
            lines.append(line)
        for child in node.get("subproofs", []):
            self._render_node(child, lines, indent + 1)
