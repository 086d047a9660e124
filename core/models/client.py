# =============================================================================
# core/models/client.py - Client Schemas
# =============================================================================
# These models define the API contract for client operations:
# - ClientCreate: Input for creating a client (the key is generated server-side)
# - ClientUpdate: Partial update of name/email
# - ClientResponse: Output when returning client rows
#
# A client is an end customer of a provider. It logs in with its email and
# an 8-digit client key instead of a password.
# =============================================================================

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

# Inclusive bounds for generated client keys (always 8 digits)
CLIENT_KEY_MIN = 10_000_000
CLIENT_KEY_MAX = 99_999_999


class ClientCreate(BaseModel):
    """
    Schema for creating a new client.

    Example:
        {
            "client_name": "Acme",
            "client_email": "a@acme.com"
        }
    """

    client_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name of the client"
    )

    client_email: str = Field(
        ...,
        min_length=3,
        max_length=320,
        description="Email the client logs in with"
    )

    @field_validator("client_name", "client_email", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class ClientUpdate(BaseModel):
    """Partial update; omitted fields are left alone."""

    client_name: str | None = Field(default=None, min_length=1, max_length=255)
    client_email: str | None = Field(default=None, min_length=3, max_length=320)

    @field_validator("client_name", "client_email", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class ClientResponse(BaseModel):
    """
    Schema for returning a client row.

    Example:
        {
            "id": 7,
            "client_name": "Acme",
            "client_email": "a@acme.com",
            "client_key": 48213377,
            "user_id": "550e8400-e29b-41d4-a716-446655440000"
        }
    """

    id: int
    client_name: str
    client_email: str
    client_key: int = Field(..., ge=CLIENT_KEY_MIN, le=CLIENT_KEY_MAX)
    user_id: UUID
