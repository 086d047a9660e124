# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Resolves the caller of each request into an explicit principal:
# - AuthUser: a provider holding a Supabase access token
# - ClientPrincipal: a client holding a client-session token
#
# Supabase tokens are verified with:
# - ES256 (Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.client_tokens import ClientTokenError, decode_client_token, is_client_token
from app.auth.models import AuthUser, ClientPrincipal

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()

JWKS_CACHE_TTL = 3600  # 1 hour


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class _JwksCache:
    """Supabase signing keys, refetched at most once per TTL."""

    def __init__(self, ttl: float = JWKS_CACHE_TTL):
        self.ttl = ttl
        self.keys: dict = {}
        self.fetched_at: float = 0

    @staticmethod
    def url() -> str:
        return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"

    def get(self) -> dict:
        now = time.time()
        if self.keys and (now - self.fetched_at) < self.ttl:
            return self.keys

        try:
            response = httpx.get(self.url(), timeout=10)
            response.raise_for_status()
            self.keys = response.json()
            self.fetched_at = now
            logger.debug(f"Fetched JWKS from {self.url()}")
        except Exception as e:
            # Stale keys beat no keys
            logger.warning(f"Failed to fetch JWKS: {e}")
            if not self.keys:
                return {"keys": []}
        return self.keys


_jwks = _JwksCache()


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Pick the key and algorithm to verify a Supabase token with.

    Returns:
        Tuple of (key, algorithm)
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _jwks.get().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def verify_user_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return the provider it belongs to.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(id=user_uuid, email=payload.get("email"))


def verify_client_token(token: str) -> ClientPrincipal:
    """
    Verify a client-session token.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    try:
        return decode_client_token(token)
    except ClientTokenError as e:
        logger.warning(f"Client token rejected: {e}")
        raise _unauthorized(str(e))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Require a provider (Supabase) token.

    Client tokens are rejected here even when valid.
    """
    token = credentials.credentials
    if is_client_token(token):
        raise _unauthorized("This endpoint requires a user login")
    return verify_user_token(token)


async def get_current_client(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> ClientPrincipal:
    """Require a client-session token."""
    token = credentials.credentials
    if not is_client_token(token):
        raise _unauthorized("This endpoint requires a client login")
    return verify_client_token(token)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser | ClientPrincipal:
    """Accept either kind of login and return whichever principal it is."""
    token = credentials.credentials
    if is_client_token(token):
        return verify_client_token(token)
    return verify_user_token(token)


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """The raw bearer token, for endpoints that forward it upstream."""
    return credentials.credentials


def principal_kind(principal: Optional[AuthUser | ClientPrincipal]) -> str:
    if isinstance(principal, ClientPrincipal):
        return "client"
    if isinstance(principal, AuthUser):
        return "user"
    return "anonymous"
