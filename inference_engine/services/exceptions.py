"""
inference_engine/services/exceptions.py
=======================================
Custom exception hierarchy for the inference engine.

Exception Tree::

    InferenceEngineError (base)
    ├── InvalidRuleError
    ├── InvalidFactError
    ├── SearchLimitExceededError
    └── InferenceInternalError

An unprovable goal or an empty derivation is a normal result and is
never reported through this hierarchy.
"""

from __future__ import annotations


class InferenceEngineError(Exception):
    """Base exception for all inference engine errors.

    All domain-specific exceptions raised within the service layer
    inherit from this class so callers can catch them uniformly.

    Attributes:
        message: Human-readable error description.
        details: Optional dict with structured error context.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message: str = message
        self.details: dict = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class InvalidRuleError(InferenceEngineError):
    """Raised when the rule base fails validation at load time.

    A rule base that raises this is never served.
    """


class InvalidFactError(InferenceEngineError):
    """Raised when submitted facts are not valid fact identifiers.

    Attributes:
        invalid_facts: The offending values, as submitted.
    """

    def __init__(self, invalid_facts: list) -> None:
        self.invalid_facts: list = invalid_facts
        super().__init__(
            message=f"Facts must be non-empty strings, got: {invalid_facts!r}",
            details={"invalid_facts": [repr(f) for f in invalid_facts]},
        )


class SearchLimitExceededError(InferenceEngineError):
    """Raised when backward chaining exhausts its search guard.

    Attributes:
        goal: The top-level goal being proved.
        limit: Name of the guard that tripped (``max_depth`` / ``max_steps``).
        value: The configured value of that guard.
    """

    def __init__(self, goal: str, limit: str, value: int) -> None:
        self.goal: str = goal
        self.limit: str = limit
        self.value: int = value
        super().__init__(
            message=f"Search limit exceeded while proving {goal!r}: {limit}={value}",
            details={"goal": goal, "limit": limit, "value": value},
        )


class InferenceInternalError(InferenceEngineError):
    """Raised when a strategy fails with an unexpected exception.

    ``details["original_error"]`` keeps the underlying message for logs
    and the CLI; the HTTP boundary answers with a generic 500 instead.
    """
