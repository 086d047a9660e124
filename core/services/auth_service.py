# =============================================================================
# core/services/auth_service.py - Login Flows
# =============================================================================
# Two independent login paths:
# - user: email + password, delegated to Supabase Auth
# - client: email + client key, checked with one combined query
#
# Each call is one attempt; nothing is retried and no state survives a
# failed attempt.
# =============================================================================

import logging
from typing import Any

from app.auth.client_tokens import issue_client_token
from app.auth.models import AuthUser, ClientPrincipal
from app.exceptions import LoginFailedError, MissingCredentialsError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

INVALID_CLIENT_LOGIN = "Invalid email or client key"


class AuthService:
    """Service for provider and client logins."""

    @staticmethod
    def login_user(email: str, password: str) -> dict[str, Any]:
        """
        Sign a provider in with Supabase.

        Returns:
            Dict with access_token, refresh_token, expires_in and user

        Raises:
            MissingCredentialsError: If email or password is empty
            LoginFailedError: With the provider's own message on rejection
        """
        if not email or not password:
            raise MissingCredentialsError("Email and password are required")

        # A fresh client per attempt keeps sessions out of shared state
        auth_client = SupabaseClient.create_auth_client()

        try:
            response = auth_client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            logger.info(f"User login rejected for {email}: {message}")
            raise LoginFailedError(message)

        session = response.session
        user = response.user
        if session is None or user is None:
            raise LoginFailedError("Login did not return a session")

        logger.info(f"User logged in: {user.id}")
        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_in": session.expires_in,
            "user": AuthUser(id=user.id, email=user.email),
        }

    @staticmethod
    def login_client(email: str, client_key: str | int) -> dict[str, Any]:
        """
        Sign a client in with its email and key.

        Both fields go into a single query, so the same message comes back
        whichever one was wrong.

        Returns:
            Dict with access_token, expires_in and client

        Raises:
            MissingCredentialsError: If email or key is empty
            LoginFailedError: If no single client matches both
        """
        if not email or client_key in ("", None):
            raise MissingCredentialsError("Email and client key are required")

        try:
            key = int(str(client_key).strip())
        except ValueError:
            raise LoginFailedError(INVALID_CLIENT_LOGIN)

        row = SupabaseClient.fetch_one(
            "clients",
            {"client_email": email, "client_key": key},
        )
        if not row:
            logger.info("Client login rejected")
            raise LoginFailedError(INVALID_CLIENT_LOGIN)

        principal = ClientPrincipal(
            id=row["id"],
            client_key=row["client_key"],
            email=row["client_email"],
            name=row.get("client_name"),
        )
        token, expires_in = issue_client_token(principal)

        logger.info(f"Client logged in: {principal.id}")
        return {"access_token": token, "expires_in": expires_in, "client": principal}

    @staticmethod
    def logout_user(access_token: str) -> None:
        """Revoke a provider's Supabase session."""
        client = SupabaseClient.get_client()
        try:
            client.auth.admin.sign_out(access_token)
        except Exception as e:
            # Already-expired sessions can't be revoked; the token dies anyway
            logger.warning(f"Supabase sign-out failed: {e}")
