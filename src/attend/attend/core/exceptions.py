from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..checkin.model import EligibilityVerdict


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or a required field is missing."""


class NotFoundError(DomainError):
    """Raised when an organization, session or person does not exist."""


class AuthorizationError(DomainError):
    """Raised when the signed-in user lacks access to an organization resource."""


class EligibilityDenied(DomainError):
    """Raised by the check-in service when the verdict does not allow check-in."""

    def __init__(self, verdict: "EligibilityVerdict", message: str | None = None):
        self.verdict = verdict
        super().__init__(message or verdict.message)


class PersistenceError(Exception):
    """Raised when the database could not answer. Never a denial."""


class DuplicateRecordError(PersistenceError):
    """Raised when an insert hits a unique constraint."""


class DeadlineExceeded(Exception):
    """Raised when a request deadline passes before all lookups finished."""
