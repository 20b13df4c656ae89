# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Supabase access tokens sent as "Authorization: Bearer <jwt>".
#
# Supports both:
# - ES256 (Supabase JWT signing keys) via the project's JWKS
# - HS256 (legacy Supabase JWT secret)
#
# Usage:
#   from app.auth import get_current_user, require_admin, AuthUser
#
#   @router.post("/payment/initialize")
#   async def initialize(user: AuthUser = Depends(get_current_user)):
#       ...
# =============================================================================

import logging
import time
from typing import Any
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth.models import AuthUser
from app.config import settings
from app.exceptions import AdminRequiredError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Missing credentials are reported by get_current_user as 401, not 403
bearer_scheme = HTTPBearer(auto_error=False)

JWT_AUDIENCE = "authenticated"
JWKS_CACHE_TTL = 3600  # 1 hour

_jwks_cache: dict[str, Any] = {}
_jwks_fetched_at: float = 0.0


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _jwks_url() -> str:
    return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict[str, Any]:
    """Fetch the project's JWKS, cached for JWKS_CACHE_TTL seconds."""
    global _jwks_cache, _jwks_fetched_at

    now = time.time()
    if _jwks_cache and (now - _jwks_fetched_at) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        response = httpx.get(_jwks_url(), timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_fetched_at = now
        logger.debug("Refreshed JWKS")
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Serve the stale key set until a refresh succeeds
        if not _jwks_cache:
            return {"keys": []}

    return _jwks_cache


def _signing_key(token: str) -> tuple[Any, str]:
    """
    Pick the key and algorithm for a token from its header.

    Returns:
        (key, algorithm) for jwt.decode
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise _unauthorized("Invalid token: unreadable header")

    algorithm = header.get("alg", "HS256")
    if algorithm == "HS256":
        return settings.SUPABASE_JWT_SECRET, algorithm

    kid = header.get("kid")
    for key in _fetch_jwks().get("keys", []):
        if key.get("kid") == kid:
            return key, algorithm

    logger.warning(f"No JWKS key for alg={algorithm}, kid={kid}")
    raise _unauthorized("Invalid token: unknown signing key")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthUser:
    """
    Extract and validate the user from a Supabase JWT.

    Returns:
        AuthUser with the user's ID and email

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Unauthorized")

    token = credentials.credentials
    key, algorithm = _signing_key(token)

    try:
        payload = jwt.decode(token, key, algorithms=[algorithm], audience=JWT_AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError:
        logger.warning(f"Invalid user ID in token: {payload.get('sub')!r}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(id=user_id, email=payload.get("email"))


async def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Allow only admins through.

    Raises:
        AdminRequiredError: 403 if the user is not an admin
    """
    if not SupabaseClient.is_admin(user.id):
        logger.warning(f"Non-admin {user.id} tried to reach an admin endpoint")
        raise AdminRequiredError()
    return user
