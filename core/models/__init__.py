# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - client.py: Client CRUD schemas and client-key bounds
# - job.py: Job schemas
# - comment.py: Comment thread schemas
# - job_file.py: File metadata, revision and presigned-URL schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .client import (
    CLIENT_KEY_MAX,
    CLIENT_KEY_MIN,
    ClientCreate,
    ClientResponse,
    ClientUpdate,
)
from .job import JobCreate, JobDetail, JobResponse
from .comment import CommentCreate, CommentResponse
from .job_file import (
    DeleteResponse,
    DownloadUrlContractResponse,
    DownloadUrlResponse,
    FileKeyRequest,
    JobFileCreate,
    JobFileResponse,
    JobUploadUrlRequest,
    JobUploadUrlResponse,
    NextRevisionResponse,
    UploadedBy,
    UploadUrlRequest,
    UploadUrlResponse,
)

__all__ = [
    # Client
    "CLIENT_KEY_MAX",
    "CLIENT_KEY_MIN",
    "ClientCreate",
    "ClientResponse",
    "ClientUpdate",
    # Job
    "JobCreate",
    "JobDetail",
    "JobResponse",
    # Comment
    "CommentCreate",
    "CommentResponse",
    # Files
    "DeleteResponse",
    "DownloadUrlContractResponse",
    "DownloadUrlResponse",
    "FileKeyRequest",
    "JobFileCreate",
    "JobFileResponse",
    "JobUploadUrlRequest",
    "JobUploadUrlResponse",
    "NextRevisionResponse",
    "UploadedBy",
    "UploadUrlRequest",
    "UploadUrlResponse",
]
