"""Custom exception hierarchy."""

class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(AppError):
    """Raised when a category rule or input constraint rejects a payload."""
    pass


class AuthorizationError(AppError):
    """Raised on a role, department or ownership mismatch."""
    pass


class NotFoundError(AppError):
    """Raised when an offer, customer, agent, policy or insurance type is missing."""
    pass


class ConsistencyError(AppError):
    """Raised when a mutation would break an offer or policy invariant."""
    pass


class DatabaseError(AppError):
    """Raised when a database operation fails."""
    pass


class TransientError(DatabaseError):
    """Raised when the database is temporarily unavailable; safe to retry."""
    pass


class InternalError(AppError):
    """Raised when an operation fails unexpectedly and was rolled back."""
    pass


class APIClientError(AppError):
    """Raised when an external API call fails."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass
