"""
inference_engine/services/forward_chaining.py
=============================================
Data-driven **forward chaining** inference strategy.

Algorithm:
    1. Copy the observed facts into the working set ``known``.
    2. Walk the forward rules in declared order; a rule fires when all
       of its antecedents are known and its consequent is not.
    3. Firing asserts the consequent and appends a trace entry.
    4. Repeat full passes until one pass fires nothing (fixpoint).
    5. Report the newly asserted facts and the faults among them.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any

from .base_strategy import InferenceStrategy
from .results import ForwardResult, TraceEntry

logger: logging.Logger = logging.getLogger(__name__)


class ForwardChainingStrategy(InferenceStrategy):
    """Forward chaining: compute everything the facts entail.

    Fans out from the observed facts and returns the full closure
    under the forward rules, together with the candidate faults found
    along the way.
    """

    def derive(self, facts: Iterable[str]) -> ForwardResult:
        """Compute the forward closure of ``facts``.

        Each fact is asserted, and traced, at most once: by the first
        qualifying rule evaluated.  Termination follows from ``known``
        only growing and being bounded by the rule consequents.

        Args:
            facts: Observed facts.  Never mutated.

        Returns:
            The :class:`ForwardResult` of the run.
        """
        initial: frozenset[str] = frozenset(facts)
        known: set[str] = set(initial)
        trace: list[TraceEntry] = []
        passes: int = 0

        changed: bool = True
        while changed:
            changed = False
            passes += 1
            for rule in self.rule_base.forward:
                if rule.consequent in known:
                    continue
                if all(a in known for a in rule.antecedents):
                    known.add(rule.consequent)
                    trace.append(TraceEntry.from_rule(rule))
                    changed = True
                    logger.debug("pass %d fired %s", passes, rule)

        derived: frozenset[str] = frozenset(known - initial)
        faults: frozenset[str] = frozenset(
            fact for fact in derived if self.rule_base.is_fault(fact)
        )
        return ForwardResult(
            input_facts=initial,
            derived_facts=derived,
            faults=faults,
            trace=tuple(trace),
            passes=passes,
        )

    def execute_inference(self, facts: frozenset[str], **kwargs: Any) -> dict:
        """Run forward chaining and return the JSON-ready result.

        Returns:
            Dict with structure::

                {
                    "strategy": "FORWARD_CHAINING",
                    "input_facts": [str, ...],
                    "derived_facts": [str, ...],
                    "faults": [str, ...],
                    "trace": [
                        {"antecedents": [...], "consequent": str,
                         "description": str},
                        ...
                    ],
                    "rules_fired": int,
                    "passes": int,
                    "execution_time_ms": int,
                }
        """
        start: float = time.perf_counter()
        result: ForwardResult = self.derive(facts)
        elapsed_ms: int = int((time.perf_counter() - start) * 1000)

        logger.info(
            "forward chaining complete: %d facts derived, %d faults in %d passes (%dms)",
            len(result.derived_facts),
            len(result.faults),
            result.passes,
            elapsed_ms,
        )

        payload: dict = result.to_dict()
        payload.update(
            {
                "strategy": "FORWARD_CHAINING",
                "rules_fired": len(result.trace),
                "passes": result.passes,
                "execution_time_ms": elapsed_ms,
            }
        )
        return payload

    def explain_result(self, result: dict) -> str:
        """Format a forward chaining result into a human-readable report.

        Args:
            result: Dict returned by :meth:`execute_inference`.

        Returns:
            Multi-line explanation string.
        """
        input_facts: list[str] = result.get("input_facts", [])
        derived: list[str] = result.get("derived_facts", [])
        faults: list[str] = result.get("faults", [])

        lines: list[str] = [
            "=== forward chaining diagnosis report ===",
            f"observed facts: {', '.join(input_facts) or 'none'}",
            f"rules fired: {len(result.get('trace', []))}",
            f"execution time: {result.get('execution_time_ms', 0)}ms",
            "",
            f"derived facts: {', '.join(derived) or 'none'}",
        ]

        if faults:
            lines.append(f"candidate faults: {', '.join(faults)}")
        else:
            lines.append("no faults derived")

        lines.append("")
        lines.append("--- trace ---")
        for idx, entry in enumerate(result.get("trace", []), start=1):
            conditions: str = " AND ".join(entry["antecedents"]) or "TRUE"
            line: str = f"{idx}. if {conditions} then {entry['consequent']}"
            if entry.get("description"):
                line += f" ({entry['description']})"
            lines.append(line)

        return "\n".join(lines)
