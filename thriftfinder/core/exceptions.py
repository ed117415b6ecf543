"""
Application exceptions. Each maps to an HTTP status with a {code, message} detail.
"""
from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base for API errors with a stable error code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "SERVER_ERROR"
    message: str = "Server error"

    def __init__(self, message: str = None, code: str = None):
        super().__init__(
            status_code=self.status_code,
            detail={"code": code or self.code, "message": message or self.message},
        )


class NotAuthenticated(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "NOT_AUTHENTICATED"
    message = "Authentication required"


class SessionExpired(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "SESSION_EXPIRED"
    message = "Session expired or invalid. Please log in again."


class InvalidCredentials(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class EmailAlreadyExists(AppException):
    status_code = status.HTTP_409_CONFLICT
    code = "EMAIL_EXISTS"
    message = "Email already registered"


class BadRequest(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    message = "Bad request"


class Forbidden(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "Forbidden"


class NotFound(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", message: str = None):
        super().__init__(message=message or f"{resource} not found")


class ServiceError(AppException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "SERVICE_ERROR"
    message = "Service temporarily unavailable. Please try again."
