class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when an employee, restriction or record does not exist."""


class ConfigurationError(DomainError):
    """Raised when stored attendance settings cannot be used for a calculation."""
