"""
Custom exceptions for the application.
"""


class StudyCoreException(Exception):
    """Base exception for all application exceptions."""
    pass


class ValidationError(StudyCoreException):
    """Raised when validation fails."""
    pass


class NotFoundError(StudyCoreException):
    """Raised when a requested resource is not found."""
    pass


class SessionNotFound(NotFoundError):
    """Raised when no active practice session matches a code or id."""
    pass


class ParticipantNotFound(NotFoundError):
    """Raised when a user has not joined the practice session."""
    pass


class ReviewItemNotFound(NotFoundError):
    """Raised when a review item does not exist."""
    pass


class ConflictError(StudyCoreException):
    """Raised when there's a conflict (e.g., duplicate entry)."""
    pass


class CapacityError(StudyCoreException):
    """Raised when a bounded resource has no room left."""
    pass


class SessionFull(CapacityError):
    """Raised when a practice session already holds max_participants."""
    pass


class CodeSpaceExhausted(CapacityError):
    """Raised when no unused session code could be allocated."""
    pass


class AuthenticationError(StudyCoreException):
    """Raised when authentication fails."""
    pass


class AuthorizationError(StudyCoreException):
    """Raised when authorization fails."""
    pass


class Unauthorized(AuthorizationError):
    """Raised when a non-host tries a host-only session action."""
    pass
