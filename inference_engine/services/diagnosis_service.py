"""
inference_engine/services/diagnosis_service.py
==============================================
Orchestration service that ties together fact normalisation and the
inference strategy.

Uses the **Strategy** pattern: callers inject or swap the
inference algorithm at runtime via :meth:`set_strategy`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .base_strategy import InferenceStrategy
from .exceptions import InferenceEngineError, InferenceInternalError, InvalidFactError

logger: logging.Logger = logging.getLogger(__name__)


class DiagnosisService:
    """High-level diagnostic orchestrator.

    Stateless between calls: each :meth:`diagnose` works on its own
    copy of the facts and only reads the strategy's rule base.

    Typical usage::

        from inference_engine.services import (
            DiagnosisService,
            ForwardChainingStrategy,
            get_rule_base,
        )

        svc = DiagnosisService(strategy=ForwardChainingStrategy(get_rule_base()))
        result = svc.diagnose(facts=["battery_low"])
    """

    def __init__(self, strategy: InferenceStrategy) -> None:
        """Initialise with an inference strategy (dependency injection).

        Args:
            strategy: Concrete :class:`InferenceStrategy` implementation.
        """
        self._strategy: InferenceStrategy = strategy

    @property
    def strategy(self) -> InferenceStrategy:
        return self._strategy

    def set_strategy(self, strategy: InferenceStrategy) -> None:
        """Replace the active inference strategy at runtime.

        Args:
            strategy: New :class:`InferenceStrategy` to use for
                subsequent :meth:`diagnose` calls.
        """
        logger.info(
            "switching inference strategy to %s",
            strategy.__class__.__name__,
        )
        self._strategy = strategy

    @staticmethod
    def normalize_facts(facts: Iterable[Any]) -> frozenset[str]:
        """Strip whitespace, drop blanks and duplicates.

        Raises:
            InvalidFactError: If any element is not a string.
        """
        invalid: list = [f for f in facts if not isinstance(f, str)]
        if invalid:
            raise InvalidFactError(invalid_facts=invalid)
        return frozenset(f.strip() for f in facts if f.strip())

    def diagnose(self, facts: Iterable[Any], **kwargs: Any) -> dict:
        """Run a diagnostic session: normalise → infer.

        Args:
            facts: Observed facts.
            **kwargs: Extra arguments forwarded to the strategy's
                :meth:`execute_inference` (e.g. ``goal`` for backward
                chaining).

        Returns:
            Dict with the inference result.

        Raises:
            InvalidFactError: If any fact is not a string.
            SearchLimitExceededError: If a bounded search runs out.
            InferenceInternalError: On unexpected errors.
        """
        facts = list(facts)
        observed: frozenset[str] = self.normalize_facts(facts)

        logger.info(
            "starting diagnosis with %d facts using %s",
            len(observed),
            self._strategy.__class__.__name__,
        )

        try:
            return self._strategy.execute_inference(facts=observed, **kwargs)
        except InferenceEngineError:
            raise
        except Exception as exc:
            logger.exception("unexpected error during diagnosis")
            raise InferenceInternalError(
                message="An unexpected error occurred during diagnosis.",
                details={"original_error": str(exc)},
            ) from exc

    def explain(self, result: dict) -> str:
        """Format a result with the current strategy's report."""
        return self._strategy.explain_result(result)
