# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the two kinds of principal and the login flows.
# =============================================================================

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class AuthUser(BaseModel):
    """
    Authenticated provider extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None

    model_config = {"frozen": True}


class ClientPrincipal(BaseModel):
    """
    Authenticated client extracted from a client-session token.

    `client_key` scopes everything the client may read or write.
    """
    id: int
    client_key: int
    email: str
    name: Optional[str] = None

    model_config = {"frozen": True}


class LoginState(str, Enum):
    """
    States of a single login attempt.

    Flow: idle -> submitting -> success | failed. A failed attempt
    leaves nothing behind; the next submission starts from idle.
    The API reports the outcome: login responses carry SUCCESS and
    rejected attempts carry FAILED in the error details.
    """
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class UserLoginRequest(BaseModel):
    """Email + password login for providers."""
    email: str = ""
    password: str = ""


class ClientLoginRequest(BaseModel):
    """Email + client key login for clients."""
    email: str = ""
    client_key: str | int = Field(default="", description="8-digit key issued by the provider")


class UserLoginResponse(BaseModel):
    state: LoginState = LoginState.SUCCESS
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"
    user: AuthUser


class ClientLoginResponse(BaseModel):
    state: LoginState = LoginState.SUCCESS
    access_token: str
    expires_in: int
    token_type: str = "bearer"
    client: ClientPrincipal


class MeResponse(BaseModel):
    """Who is calling: exactly one of `user` / `client` is set."""
    kind: str
    user: Optional[AuthUser] = None
    client: Optional[ClientPrincipal] = None
