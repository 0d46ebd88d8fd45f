from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDate(ValidationError):
    """Raised when a date or year-month string is malformed."""


class InvalidStatus(ValidationError):
    """Raised when a status value is not one of the known day statuses."""


class SessionNotFound(DomainError):
    """Raised when an explicitly named session does not exist.

    Carries the names the caller can offer instead.
    """

    def __init__(self, identifier: str, available: Sequence[str] = ()):
        super().__init__(f"Session not found: {identifier!r}")
        self.identifier = identifier
        self.available = list(available)


class AmbiguousSession(DomainError):
    """Raised when a session name matches several sessions and no code was given."""

    def __init__(self, identifier: str, candidates: Sequence[object] = ()):
        super().__init__(f"Session name is ambiguous: {identifier!r}")
        self.identifier = identifier
        self.candidates = list(candidates)


class StorageUnavailable(DomainError):
    """Raised when the durable store cannot be reached. Safe to retry."""

    retryable = True


class InvariantViolation(DomainError):
    """Raised (and logged) when stored data breaks a structural invariant."""
