"""Exceptions for result normalization and consolidation."""

from typing import Any, Optional


class ConsolidationError(Exception):
    """Base exception for consolidation engine errors."""

    pass


class MalformedResultError(ConsolidationError):
    """A model's raw payload cannot be normalized."""

    def __init__(self, model: str, reason: str, payload: Any = None):
        super().__init__(f"Malformed result from {model}: {reason}")
        self.model = model
        self.reason = reason
        self.payload = payload


class InsufficientDataError(ConsolidationError):
    """No model produced usable output."""

    pass


class AlreadyResolvedError(ConsolidationError):
    """A conflict already carries a resolution."""

    def __init__(self, message: str, existing_resolution: Optional[str] = None):
        super().__init__(message)
        self.existing_resolution = existing_resolution


class UpstreamAuthError(ConsolidationError):
    """Model invocation failed upstream because of authentication.

    Raised by the collaborator that calls the models, never by the engine.
    Passing it to consolidation yields an auth-required judgment.
    """

    pass


class InconsistentInputError(ConsolidationError, ValueError):
    """Derived inputs passed to a stage do not describe the same model set."""

    pass


class ClampedValueWarning(UserWarning):
    """A numeric field was outside its domain and has been clamped."""

    def __init__(self, model: str, field: str, original: float, clamped: float):
        super().__init__(
            f"{model}: {field}={original!r} clamped to {clamped!r}"
        )
        self.model = model
        self.field = field
        self.original = original
        self.clamped = clamped
