"""
Session layer - Redis-backed bearer tokens for signed-in users.

Each token maps to a small JSON payload (uid, email, role and the provider
access token used for global sign-out). Reads slide the TTL forward.
"""
from typing import Optional, Dict, Any
import logging
import json
import redis

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session:"
REQUIRED_FIELDS = ("uid", "role")

_redis_pool: Optional[redis.ConnectionPool] = None
_redis_client: Optional[redis.Redis] = None
_session_ttl: int = 86400


def init_redis(host: str, port: int, db: int, session_ttl: int = 86400) -> None:
    """Initialize Redis connection pool. Call once at app startup."""
    global _redis_pool, _redis_client, _session_ttl
    _redis_pool = redis.ConnectionPool(
        host=host,
        port=port,
        db=db,
        decode_responses=True,
        max_connections=10
    )
    _redis_client = redis.Redis(connection_pool=_redis_pool)
    _session_ttl = session_ttl
    logger.info(f"Redis initialized: {host}:{port}/{db}, TTL: {session_ttl}s")


def _get_redis_client() -> redis.Redis:
    """Get Redis client. Raises if not initialized."""
    if _redis_client is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis_client


def _key(token: str) -> str:
    return f"{SESSION_PREFIX}{token}"


def create_session(token: str, user_data: Dict[str, Any]) -> None:
    """Store the session payload under token with the configured TTL."""
    missing = [f for f in REQUIRED_FIELDS if not user_data.get(f)]
    if missing:
        raise ValueError(f"Session payload missing: {', '.join(missing)}")
    client = _get_redis_client()
    client.setex(_key(token), _session_ttl, json.dumps(user_data))
    logger.info(f"Session created for user: {user_data['uid']} ({user_data['role']})")


def get_session(token: str) -> Optional[Dict[str, Any]]:
    """Session payload for token, or None. A hit extends the TTL."""
    client = _get_redis_client()
    pipe = client.pipeline()
    pipe.get(_key(token))
    pipe.expire(_key(token), _session_ttl)
    data, _ = pipe.execute()
    if not data:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        logger.warning("Discarding unreadable session payload")
        client.delete(_key(token))
        return None


def remove_session(token: str) -> bool:
    """Drop a session (logout). Returns False when it had already expired."""
    client = _get_redis_client()
    removed = client.delete(_key(token)) > 0
    if removed:
        logger.info("Session removed")
    return removed


def extract_token(auth_header: Optional[str]) -> Optional[str]:
    """Bearer token from an Authorization header, or None."""
    if not auth_header:
        return None

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip() or " " in token.strip():
        return None

    return token.strip()
