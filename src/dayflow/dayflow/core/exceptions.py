class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class BackendError(DomainError):
    """Raised when the auth/data backend cannot complete a call."""


class ReentrantCallError(BackendError):
    """Raised when the auth client is called while it is dispatching a session event."""
