"""
Session Middleware - loads session from Redis for each request.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable
from thriftfinder.session import extract_token, get_session
import logging

logger = logging.getLogger(__name__)


class SessionMiddleware(BaseHTTPMiddleware):
    """Loads session from Redis based on Authorization header."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.session = {}
        request.state.token = None

        auth_header = request.headers.get("authorization")
        token = extract_token(auth_header)

        if token:
            request.state.token = token
            try:
                user_data = get_session(token)
            except RuntimeError as e:
                logger.error(f"Session lookup failed: {e}")
                user_data = None
            if user_data:
                request.state.session = user_data

        response = await call_next(request)
        return response
