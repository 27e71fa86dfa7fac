from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid; never reaches the backend."""


class CheckInCooldownError(ValidationError):
    """Raised when a check-in follows the previous one too closely."""

    def __init__(self, remaining_minutes: int):
        self.remaining_minutes = remaining_minutes
        super().__init__(f"You can check in again after {remaining_minutes} minute(s). Please wait.")


class InvalidDurationError(ValidationError):
    """Raised when a check-out timestamp precedes its check-in."""


class InvalidQrPayloadError(ValidationError):
    """Raised when a scanned QR token cannot be accepted."""


class AuthenticationError(DomainError):
    """Raised when there is no valid session or credentials are wrong."""


class SessionExpiredError(AuthenticationError):
    """Raised when the access token has expired and cannot be renewed."""

    def __init__(self, message: str = "Your session has expired. Please sign in again."):
        super().__init__(message)


class AuthorizationError(DomainError):
    """Raised when a user lacks the role for an action."""

    def __init__(self, message: str = "You do not have permission", *, redirect_to: Optional[str] = None):
        self.redirect_to = redirect_to
        super().__init__(message)


class BackendError(DomainError):
    """A query error returned by the managed backend, surfaced verbatim."""


class PrivilegedFunctionError(DomainError):
    """Transport or application error from an account-management function."""
