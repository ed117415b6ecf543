"""
Workflow client errors.
"""
from typing import Any, Optional


class ApiError(Exception):
    """Non-2xx response or transport failure talking to the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[Any] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @property
    def reason(self) -> str:
        return str(self)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class AuthenticationRequired(Exception):
    """No user is signed in. Callers redirect to login instead of showing a banner."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class SubscriptionError(Exception):
    """The live message subscription failed or was rejected."""
