# =============================================================================
# core/models/comment.py - Comment Schemas
# =============================================================================
# Comments are an append-only thread on a job. `from_client` tells the two
# possible authors apart: the client (True) or the provider (False).
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    """Body for posting a comment. Author is taken from the caller's login."""

    comment: str = Field(..., max_length=10_000)


class CommentResponse(BaseModel):
    id: int | None = None
    job_id: int
    comment: str
    from_client: bool
    created_at: datetime | None = None
