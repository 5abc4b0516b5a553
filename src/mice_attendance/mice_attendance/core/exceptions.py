class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a scanned code, student or event does not exist."""


class AmbiguousIdentityError(DomainError):
    """Raised when a scan token matches more than one student.

    This means the uniqueness constraint on scan tokens is broken. It is a
    configuration problem and must not be retried.
    """


class PersistenceFailure(DomainError):
    """Raised when the database is unreachable or rejects a write."""


class IntegrityViolation(PersistenceFailure):
    """Raised when a write violates a unique or foreign key constraint."""


class NotificationFailure(DomainError):
    """Raised by mail transports when a message could not be delivered."""
