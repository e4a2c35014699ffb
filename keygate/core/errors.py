"""
Gateway exceptions
Every error raised at the request boundary carries its HTTP status code
"""
from typing import Optional

from fastapi import status


class KeygateError(Exception):
    """Base gateway error rendered as {success: false, message, error?}"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "internal_error"

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class ValidationError(KeygateError):
    """Request body is missing a required field"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "validation_error"


class DuplicateRegistrationError(KeygateError):
    """A key already exists for the email"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "already_registered"

    def __init__(self, email: str):
        super().__init__("This email has already been registered for the hackathon.")
        self.email = email


class RegistrationClosedError(KeygateError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "registration_closed"

    def __init__(self):
        super().__init__("Registration is currently closed")


class AuthError(KeygateError):
    """Missing or wrong admin token"""
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "auth_error"

    def __init__(self, message: str = "Unauthorized access"):
        super().__init__(message)


class UpstreamError(KeygateError):
    """
    Non-success response or transport failure from OpenRouter.

    ``error`` holds the upstream message; ``message`` is the summary shown
    to the caller and is replaced at the route with what was being attempted.
    """
    error_code = "upstream_error"

    def __init__(
        self,
        error: str,
        message: str = "Upstream key service request failed",
        upstream_status: Optional[int] = None
    ):
        super().__init__(message, error=error)
        self.upstream_status = upstream_status

    def during(self, message: str) -> "UpstreamError":
        """Copy of this error with the caller-facing summary replaced"""
        return UpstreamError(self.error, message=message, upstream_status=self.upstream_status)


class ConfigError(Exception):
    """Registration flag file is unreadable or malformed"""

    def __init__(self, path, reason: str):
        super().__init__(f"Invalid registration config at {path}: {reason}")
        self.path = path
        self.reason = reason
