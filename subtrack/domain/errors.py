"""Subscription-related exceptions."""


class SubscriptionError(Exception):
    """Base exception for subscription operations."""

    pass


class ValidationError(SubscriptionError, ValueError):
    """Raised when input is malformed or violates a record constraint."""

    pass


class InvalidDateFormat(ValidationError):
    """Raised when a period is not a valid MM-YYYY value."""

    pass


class InvalidPrice(ValidationError):
    """Raised when a price is negative or not an integer."""

    pass


class InvalidServiceName(ValidationError):
    """Raised when a service name is blank."""

    pass


class InvalidUserID(ValidationError):
    """Raised when a user identifier is not 36 characters long."""

    pass


class InvalidDateRange(ValidationError):
    """Raised when a start period falls after the end period."""

    pass


class InvalidIdentifier(ValidationError):
    """Raised when a record identifier is not a positive integer."""

    pass


class MissingField(ValidationError):
    """Raised when a required field is absent from a create payload."""

    pass


class EmptyPatch(ValidationError):
    """Raised when a patch carries no fields to update."""

    pass


class NotFoundError(SubscriptionError):
    """Raised when the referenced record does not exist."""

    pass


class ConflictError(SubscriptionError):
    """Raised when an operation conflicts with stored state."""

    pass


class InternalError(SubscriptionError):
    """Raised when the store or other infrastructure fails."""

    pass
