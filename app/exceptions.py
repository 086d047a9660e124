# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code and, where useful, a suggestion on
# how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.auth.models import LoginState


class ClientSideException(Exception):
    """
    Base exception for the ClientSide API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "CLIENTSIDE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Not Found Exceptions
# =============================================================================
# Also raised when the row exists but belongs to someone else, so callers
# can't discover other providers' records.

class ClientNotFoundError(ClientSideException):
    """Raised when a client doesn't exist or isn't owned by the caller."""

    def __init__(self, client_id: int | str):
        super().__init__(
            message=f"Client not found: {client_id}",
            code="CLIENT_NOT_FOUND",
            status_code=404,
            suggestion="Go back to the client list and pick an existing client",
            details={"client_id": client_id}
        )


class JobNotFoundError(ClientSideException):
    """Raised when a job doesn't exist or isn't visible to the caller."""

    def __init__(self, job_id: int | str):
        super().__init__(
            message=f"Job not found: {job_id}",
            code="JOB_NOT_FOUND",
            status_code=404,
            suggestion="Go back to the job list and pick an existing job",
            details={"job_id": job_id}
        )


class JobFileNotFoundError(ClientSideException):
    """Raised when a job file row doesn't exist."""

    def __init__(self, file_id: int | str):
        super().__init__(
            message=f"File not found: {file_id}",
            code="JOB_FILE_NOT_FOUND",
            status_code=404,
            details={"file_id": file_id}
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class LoginFailedError(ClientSideException):
    """Raised when a login attempt is rejected."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="LOGIN_FAILED",
            status_code=401,
            details={"state": LoginState.FAILED.value},
        )


class MissingCredentialsError(ClientSideException):
    """Raised when a login form is submitted with empty fields."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="MISSING_CREDENTIALS",
            status_code=400,
            details={"state": LoginState.FAILED.value},
        )


# =============================================================================
# Validation Exceptions
# =============================================================================

class EmptyCommentError(ClientSideException):
    """Raised when a comment has no text."""

    def __init__(self, job_id: int | str):
        super().__init__(
            message="Comment is required",
            code="EMPTY_COMMENT",
            status_code=400,
            details={"job_id": job_id}
        )


class RevisionConflictError(ClientSideException):
    """Raised when a revision number is already taken for a job."""

    def __init__(self, job_id: int | str, revision_number: int):
        super().__init__(
            message=f"Revision {revision_number} already exists for job {job_id}",
            code="REVISION_CONFLICT",
            status_code=409,
            suggestion="Fetch the next revision number and upload again",
            details={"job_id": job_id, "revision_number": revision_number}
        )


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageApiError(ClientSideException):
    """
    Error raised by the presigned-URL endpoints.

    These endpoints answer with a bare `{"error": ...}` body, so the
    serialized form drops the code/suggestion envelope.
    """

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(
            message=message,
            code="STORAGE_API_ERROR",
            status_code=status_code,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class StorageRequestError(StorageApiError):
    """Raised when a presigned-URL request is missing required fields."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class DeleteIncompleteError(ClientSideException):
    """Raised when a multi-step delete stops partway."""

    def __init__(self, what: str, step: str, error: str, compensated: bool):
        super().__init__(
            message=f"Failed to delete {what} at step '{step}': {error}",
            code="DELETE_INCOMPLETE",
            status_code=500,
            suggestion=(
                "Nothing was removed; try again"
                if compensated
                else "Some data may have been removed; review and retry"
            ),
            details={"step": step, "error": error, "compensated": compensated}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def clientside_exception_handler(
    request: Request,
    exc: ClientSideException
) -> JSONResponse:
    """Convert ClientSideException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    errors = jsonable_encoder(exc.errors()) if hasattr(exc, "errors") else str(exc)
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )
