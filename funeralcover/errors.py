"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
ACCESS_DENIED = "ACCESS_DENIED"
INVALID_TRANSITION = "INVALID_TRANSITION"
UNAVAILABLE = "UNAVAILABLE"
NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
UNAUTHORIZED = "UNAUTHORIZED"
FORBIDDEN = "FORBIDDEN"

# AccessDeniedError reasons.
TRIAL_EXPIRED = "trial_expired"
SUBSCRIPTION_EXPIRED = "subscription_expired"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail (e.g. non-positive amount, missing required fields)."""

    pass


class AccessDeniedError(DomainError):
    """Raised when a user's trial or paid subscription has expired.

    ``reason`` is either TRIAL_EXPIRED or SUBSCRIPTION_EXPIRED so callers can
    route the user to the right payment prompt.
    """

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason

    @property
    def trial_expired(self) -> bool:
        return self.reason == TRIAL_EXPIRED


class InvalidTransitionError(DomainError):
    """Raised when a claim event is not allowed from the claim's current status."""

    pass


class UnavailableError(DomainError):
    """Raised when storage or another collaborator fails."""

    pass


class NotSupportedError(DomainError):
    """Raised for operations that are deliberately not implemented (e.g. policy reinstatement)."""

    pass


class UnauthorizedError(DomainError):
    """Raised when credentials are missing or wrong."""

    pass


class ForbiddenError(DomainError):
    """Raised when the authenticated user lacks the role required for an action."""

    pass


class NotificationError(DomainError):
    """Raised by a notification sender when a message could not be delivered.

    Batch jobs log and count these; they are never surfaced to API callers.
    """

    pass
