# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provider logins use Supabase Auth; client logins use an email + client key
# and receive a client-session token signed by this API.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    get_bearer_token,
    get_current_client,
    get_current_principal,
    get_current_user,
)
from app.auth.models import AuthUser, ClientPrincipal, LoginState

__all__ = [
    "get_bearer_token",
    "get_current_client",
    "get_current_principal",
    "get_current_user",
    "AuthUser",
    "ClientPrincipal",
    "LoginState",
]
