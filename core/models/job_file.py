# =============================================================================
# core/models/job_file.py - Job File Schemas
# =============================================================================
# Each JobFile row describes one object in the object store. Files are
# grouped into revisions; revision numbers grow by one per upload round.
#
# The presigned-URL request models use the camelCase field names of the
# public /api/upload, /api/download and /api/delete contract.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class UploadedBy(str, Enum):
    """Which side of the job uploaded a file."""
    USER = "user"
    CLIENT = "client"


class JobFileCreate(BaseModel):
    """
    Metadata registered after a browser finished a presigned upload.

    Leave `revision_number` out to let the server assign the next one.
    """

    file_key: str = Field(..., min_length=1, max_length=1024)
    file_name: str = Field(..., min_length=1, max_length=255)
    file_size: int = Field(..., ge=0, description="Size in bytes")
    revision_number: int | None = Field(default=None, ge=1)


class JobFileResponse(BaseModel):
    id: int
    job_id: int
    file_key: str
    file_name: str
    file_size: int
    revision_number: int
    uploaded_by: UploadedBy
    uploaded_at: datetime | None = None


class NextRevisionResponse(BaseModel):
    job_id: int
    revision_number: int


class JobUploadUrlRequest(BaseModel):
    """Ask for an upload URL on a job; the server picks the revision."""

    file_name: str = Field(..., min_length=1, max_length=255)
    file_type: str = Field(..., min_length=1, max_length=255)


class JobUploadUrlResponse(BaseModel):
    upload_url: str
    key: str
    revision_number: int


class DownloadUrlResponse(BaseModel):
    download_url: str


# =============================================================================
# Presigned-URL endpoint contract
# =============================================================================
# Fields are untyped: any JSON value is accepted and judged by truthiness,
# so a missing or odd-typed field becomes the endpoint's own 400
# {"error": ...} rather than a 422 validation error. Values are turned into
# strings where they are used.

class UploadUrlRequest(BaseModel):
    fileName: Any = None
    fileType: Any = None
    jobId: Any = None
    userId: Any = None
    revisionNumber: Any = None

    def is_complete(self) -> bool:
        """All five fields present and non-empty (0 counts as missing)."""
        return all([self.fileName, self.fileType, self.jobId, self.userId, self.revisionNumber])


class UploadUrlResponse(BaseModel):
    uploadUrl: str
    key: str


class FileKeyRequest(BaseModel):
    fileKey: Any = None


class DownloadUrlContractResponse(BaseModel):
    downloadUrl: str


class DeleteResponse(BaseModel):
    success: bool = True
