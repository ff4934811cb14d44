class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class SessionNotFoundError(DomainError):
    """Raised when a session id does not match any stored session."""


class LocationUnavailableError(DomainError):
    """Raised when no position fix could be acquired."""


class LocationCancelledError(LocationUnavailableError):
    """Raised when the caller aborted an in-flight position request."""
