# =============================================================================
# app/auth/client_tokens.py - Client Session Tokens
# =============================================================================
# Clients don't have Supabase accounts. After a successful key login the API
# hands out a short-lived HS256 token signed with SECRET_KEY that carries the
# client's identity; the token replaces any server-side session storage.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import ClientPrincipal

logger = logging.getLogger(__name__)

CLIENT_TOKEN_AUDIENCE = "clientside-client"
CLIENT_TOKEN_ALGORITHM = "HS256"


class ClientTokenError(Exception):
    """Raised when a client token can't be trusted."""


def issue_client_token(client: ClientPrincipal, now: datetime | None = None) -> tuple[str, int]:
    """
    Sign a token for a logged-in client.

    Returns:
        Tuple of (token, lifetime in seconds)
    """
    now = now or datetime.now(timezone.utc)
    lifetime = timedelta(minutes=settings.CLIENT_SESSION_TTL_MINUTES)

    claims = {
        "sub": str(client.id),
        "aud": CLIENT_TOKEN_AUDIENCE,
        "role": "client",
        "client_key": client.client_key,
        "email": client.email,
        "name": client.name,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=CLIENT_TOKEN_ALGORITHM)
    return token, int(lifetime.total_seconds())


def is_client_token(token: str) -> bool:
    """Peek at the audience without verifying the signature."""
    try:
        return jwt.get_unverified_claims(token).get("aud") == CLIENT_TOKEN_AUDIENCE
    except JWTError:
        return False


def decode_client_token(token: str) -> ClientPrincipal:
    """
    Verify a client token and rebuild the principal.

    Raises:
        ClientTokenError: If the token is expired, forged or malformed
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[CLIENT_TOKEN_ALGORITHM],
            audience=CLIENT_TOKEN_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise ClientTokenError("Token has expired")
    except JWTError as e:
        raise ClientTokenError(f"Invalid token: {e}")

    try:
        return ClientPrincipal(
            id=int(payload["sub"]),
            client_key=int(payload["client_key"]),
            email=payload["email"],
            name=payload.get("name"),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Client token missing claims: {e}")
        raise ClientTokenError("Invalid token: missing client claims")
