"""
FastAPI dependencies for route protection.
"""
import logging
from fastapi import Request, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from thriftfinder.core.exceptions import NotAuthenticated, SessionExpired
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI docs (shows lock icon and Authorization header)
bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="Token from the login endpoint",
    auto_error=False,
)


async def validate_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)
) -> Dict[str, Any]:
    """
    Validates session loaded by middleware.

    Returns:
        Session dict with uid, email, role

    Raises:
        NotAuthenticated: No token provided
        SessionExpired: Token unknown, expired, or the session store is down
    """
    if not request.state.token:
        raise NotAuthenticated()

    session = request.state.session
    if not session or not session.get("uid"):
        raise SessionExpired()

    return session


def get_current_token(request: Request) -> str:
    """Get current token from request state."""
    if not request.state.token:
        raise NotAuthenticated()
    return request.state.token


def session_from_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Session for a raw token (WebSocket query auth). None when absent or unknown."""
    if not token:
        return None
    from thriftfinder.session import get_session
    try:
        session = get_session(token)
    except RuntimeError as e:
        logger.error(f"Session lookup failed: {e}")
        return None
    if not session or not session.get("uid"):
        return None
    return session
