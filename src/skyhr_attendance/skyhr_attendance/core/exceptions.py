class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DecodeError(ValidationError):
    """Raised when a QR token cannot be decoded with the configured secret."""


class ConflictError(DomainError):
    """Raised when an operation would duplicate existing state (e.g. an open check-in)."""


class AuthenticationError(DomainError):
    """Raised when the request carries no user or no active organization."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist in the caller's organization."""


class DependencyError(DomainError):
    """Raised when an external collaborator (face oracle, storage) fails."""


class PersistenceError(DependencyError):
    """Raised when the database rejects or fails an operation."""


class ConfigurationError(Exception):
    """Raised at startup when required settings are missing or invalid."""
