"""
inference_engine/services/__init__.py
=====================================
Service layer for the fault diagnosis inference engine.

Exports:
    - Rule, RuleBase, is_fault: Immutable rule representation.
    - TraceEntry, ForwardResult, ProofNode, ProofResult: Inference results.
    - InferenceStrategy: Abstract base class for inference strategies.
    - ForwardChainingStrategy: Data-driven forward chaining implementation.
    - BackwardChainingStrategy: Goal-driven backward chaining implementation.
    - DiagnosisService: Orchestration service with strategy pattern.
    - KnowledgeBaseRepository, get_rule_base: Rule base loading and access.
    - InferenceEngineError, InvalidRuleError, InvalidFactError,
      SearchLimitExceededError, InferenceInternalError: Custom exceptions.
"""

from .base_strategy import InferenceStrategy
from .backward_chaining import BackwardChainingStrategy
from .diagnosis_service import DiagnosisService
from .exceptions import (
    InferenceEngineError,
    InferenceInternalError,
    InvalidFactError,
    InvalidRuleError,
    SearchLimitExceededError,
)
from .forward_chaining import ForwardChainingStrategy
from .knowledge_base_repository import (
    KnowledgeBaseRepository,
    diagnosis_settings,
    get_rule_base,
)
from .results import ForwardResult, ProofNode, ProofResult, TraceEntry
from .rule_base import Rule, RuleBase, is_fault

__all__: list[str] = [
    "Rule",
    "RuleBase",
    "is_fault",
    "TraceEntry",
    "ForwardResult",
    "ProofNode",
    "ProofResult",
    "InferenceStrategy",
    "ForwardChainingStrategy",
    "BackwardChainingStrategy",
    "DiagnosisService",
    "KnowledgeBaseRepository",
    "diagnosis_settings",
    "get_rule_base",
    "InferenceEngineError",
    "InferenceInternalError",
    "InvalidRuleError",
    "InvalidFactError",
    "SearchLimitExceededError",
]
