from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the caller is not logged in or credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced request, user or notification does not exist."""


class ConflictError(DomainError):
    """Raised when a write would violate a uniqueness rule."""


class ConnectorError(DomainError):
    """Raised when a call to the external HR provider fails."""

    def __init__(self, message: str, *, operation: str = "", status_code: int | None = None):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
