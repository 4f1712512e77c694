class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400


class AuthError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class AuthorizationError(AppError):
    """Authenticated user lacks the required role."""

    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Duplicate punch-in, running timer or duplicate email."""

    status_code = 400
