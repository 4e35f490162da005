"""
Application Errors

Services raise these and let them propagate to the GraphQL layer, where
Strawberry attaches the message to the `errors` list of the response.
"""


class AuthenticationError(Exception):
    """Raised when authentication is required but not provided."""

    pass


class AuthorizationError(Exception):
    """Raised when the author lacks permission for an operation."""

    pass


class NotFoundError(Exception):
    """Raised when a requested resource is not found."""

    pass


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass
