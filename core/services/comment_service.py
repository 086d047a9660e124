# =============================================================================
# core/services/comment_service.py - Comment Thread
# =============================================================================
# Comments are append-only: there is no edit or delete.
# Callers check that the author may see the job before calling in.
# =============================================================================

import logging
from typing import Any

from app.exceptions import EmptyCommentError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class CommentService:
    """Service for the comment thread on a job."""

    @staticmethod
    def list_comments(job_id: int) -> list[dict[str, Any]]:
        """Comments on a job, most recent first."""
        return SupabaseClient.fetch_many(
            "comments",
            {"job_id": job_id},
            order_by="created_at",
            desc=True,
        )

    @staticmethod
    def add_comment(job_id: int, comment: str, from_client: bool) -> dict[str, Any]:
        """
        Append a comment.

        Raises:
            EmptyCommentError: If the text is blank
        """
        if not comment or not comment.strip():
            raise EmptyCommentError(job_id)

        row = SupabaseClient.insert_row("comments", {
            "job_id": job_id,
            "comment": comment,
            "from_client": from_client,
        })

        logger.info(f"Added {'client' if from_client else 'provider'} comment to job {job_id}")
        return row
