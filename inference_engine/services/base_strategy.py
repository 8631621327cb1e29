"""
inference_engine/services/base_strategy.py
==========================================
Abstract base class defining the contract every inference strategy
must fulfil.  Follows the **Strategy** design pattern so the
:class:`DiagnosisService` can swap algorithms at runtime.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .rule_base import RuleBase


class InferenceStrategy(ABC):
    """Abstract inference strategy interface.

    Subclasses implement a concrete algorithm (e.g. forward chaining,
    backward chaining) while the :class:`DiagnosisService` interacts
    only with this interface.  Every strategy is bound to one
    :class:`RuleBase` at construction and never modifies it.
    """

    def __init__(self, rule_base: RuleBase) -> None:
        self.rule_base: RuleBase = rule_base

    @abstractmethod
    def execute_inference(self, facts: frozenset[str], **kwargs: Any) -> dict:
        """Run the inference algorithm against the rule base.

        Args:
            facts: Observed facts, already normalised by the caller.
            **kwargs: Strategy-specific keyword arguments.  For example
                :class:`BackwardChainingStrategy` requires ``goal``.

        Returns:
            A JSON-ready dict containing at minimum::

                {
                    "strategy": str,
                    "execution_time_ms": int,
                }

        Raises:
            InferenceEngineError: On any unrecoverable engine failure.
            SearchLimitExceededError: If a bounded search runs out.
        """
        ...

    @abstractmethod
    def explain_result(self, result: dict) -> str:
        """Produce a human-readable explanation of an inference result.

        Args:
            result: The dict previously returned by
                :meth:`execute_inference`.

        Returns:
            A formatted multi-line explanation string.
        """
        ...
