"""Exception hierarchy for errors surfaced to API clients."""


class StatusCodeError(Exception):
    """Base exception carrying the HTTP status returned to the client."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(StatusCodeError):
    """Raised when a request body is missing required fields."""
    status_code = 400


class UnauthorizedError(StatusCodeError):
    """Raised when a request carries no valid auth token."""
    status_code = 401


class ForbiddenError(StatusCodeError):
    """Raised when the authenticated user lacks the required role."""
    status_code = 403


class NotFoundError(StatusCodeError):
    """Raised when a referenced record does not exist."""
    status_code = 404
