"""
utils/exceptions.py

Error taxonomy shared by services and routers.
Each error carries the code and HTTP status the global handler renders it with.
"""


class AppError(Exception):
    code = "APP_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed input: rejected before anything is written."""
    code = "VALIDATION_ERROR"
    status_code = 400


class InvalidTransitionError(ValidationError):
    """A submission review on a row that is no longer pending."""
    code = "INVALID_TRANSITION"
    status_code = 409


class AuthorizationError(AppError):
    """Caller may not perform this operation (wrong role, not owner, not pending)."""
    code = "FORBIDDEN"
    status_code = 403


class AuthenticationError(AuthorizationError):
    code = "UNAUTHORIZED"
    status_code = 401


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404
