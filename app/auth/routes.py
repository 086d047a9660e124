# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Login for both kinds of principal, logout, and "who am I".
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.client_tokens import is_client_token
from app.auth.dependencies import get_bearer_token, get_current_principal, principal_kind
from app.auth.models import (
    AuthUser,
    ClientLoginRequest,
    ClientLoginResponse,
    ClientPrincipal,
    MeResponse,
    UserLoginRequest,
    UserLoginResponse,
)
from core.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login/user", response_model=UserLoginResponse)
def login_user(request: UserLoginRequest) -> UserLoginResponse:
    """
    Provider login with email and password.

    Returns the Supabase access token to send as `Authorization: Bearer`.

    Raises:
        400: If a field is empty
        401: With Supabase's message if the credentials are rejected
    """
    result = AuthService.login_user(request.email.strip(), request.password)
    return UserLoginResponse(**result)


@router.post("/login/client", response_model=ClientLoginResponse)
def login_client(request: ClientLoginRequest) -> ClientLoginResponse:
    """
    Client login with email and client key.

    Raises:
        400: If a field is empty
        401: "Invalid email or client key" for any mismatch
    """
    result = AuthService.login_client(request.email.strip(), request.client_key)
    return ClientLoginResponse(**result)


@router.post("/logout")
def logout(
    principal: AuthUser | ClientPrincipal = Depends(get_current_principal),
    token: str = Depends(get_bearer_token),
) -> dict:
    """
    End the caller's session.

    Provider sessions are revoked at Supabase. Client tokens are stateless;
    the client just discards it.
    """
    if not is_client_token(token):
        AuthService.logout_user(token)

    return {"logged_out": True, "kind": principal_kind(principal)}


@router.get("/me", response_model=MeResponse)
async def me(
    principal: AuthUser | ClientPrincipal = Depends(get_current_principal),
) -> MeResponse:
    """Return the principal behind the current token."""
    if isinstance(principal, ClientPrincipal):
        return MeResponse(kind="client", client=principal)
    return MeResponse(kind="user", user=principal)


@router.get("/verify")
async def verify_token(
    principal: AuthUser | ClientPrincipal = Depends(get_current_principal),
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {"valid": True, "kind": principal_kind(principal)}
