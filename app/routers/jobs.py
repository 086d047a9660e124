# =============================================================================
# app/routers/jobs.py - Provider Job Endpoints
# =============================================================================
# A single job as seen by the provider who owns its client: details,
# deletion, the comment thread, and file revisions.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import AuthUser, get_current_user
from core.models.comment import CommentCreate, CommentResponse
from core.models.job import JobDetail
from core.models.job_file import (
    DownloadUrlResponse,
    JobFileCreate,
    JobFileResponse,
    JobUploadUrlRequest,
    JobUploadUrlResponse,
    NextRevisionResponse,
    UploadedBy,
)
from core.services.comment_service import CommentService
from core.services.job_file_service import JobFileService
from core.services.job_service import JobService

router = APIRouter()

JobId = Annotated[int, Path(description="Job id", ge=1)]
FileId = Annotated[int, Path(description="Job file id", ge=1)]


@router.get("/{job_id}", response_model=JobDetail)
def get_job(job_id: JobId, user: AuthUser = Depends(get_current_user)):
    """Job details plus the name and id of its client."""
    job, client = JobService.get_job_for_user(job_id, user.id)
    return JobDetail(**job, client_id=client["id"], client_name=client["client_name"])


@router.delete("/{job_id}")
def delete_job(job_id: JobId, user: AuthUser = Depends(get_current_user)):
    """
    Delete a job.

    Its comments and file rows are removed by the database; stored files
    are cleaned up best-effort.
    """
    JobService.delete_job(job_id, user.id)
    return {"job_id": job_id, "message": "Job deleted successfully"}


# =============================================================================
# Comments
# =============================================================================

@router.get("/{job_id}/comments", response_model=list[CommentResponse])
def list_comments(job_id: JobId, user: AuthUser = Depends(get_current_user)):
    """Comments on the job, most recent first."""
    JobService.get_job_for_user(job_id, user.id)
    return CommentService.list_comments(job_id)


@router.post("/{job_id}/comments", response_model=CommentResponse, status_code=201)
def add_comment(
    job_id: JobId,
    request: CommentCreate,
    user: AuthUser = Depends(get_current_user),
):
    JobService.get_job_for_user(job_id, user.id)
    return CommentService.add_comment(job_id, request.comment, from_client=False)


# =============================================================================
# Files & Revisions
# =============================================================================

@router.get("/{job_id}/files", response_model=list[JobFileResponse])
def list_files(job_id: JobId, user: AuthUser = Depends(get_current_user)):
    JobService.get_job_for_user(job_id, user.id)
    return JobFileService.list_files(job_id)


@router.get("/{job_id}/files/next-revision", response_model=NextRevisionResponse)
def next_revision(job_id: JobId, user: AuthUser = Depends(get_current_user)):
    """The revision number the next upload would get."""
    JobService.get_job_for_user(job_id, user.id)
    return NextRevisionResponse(
        job_id=job_id,
        revision_number=JobFileService.next_revision_number(job_id),
    )


@router.post("/{job_id}/files/upload-url", response_model=JobUploadUrlResponse)
def create_upload_url(
    job_id: JobId,
    request: JobUploadUrlRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Presign an upload for the job's next revision.

    Register the file with the returned `revision_number` once the PUT
    finishes. A 409 on registration means another upload claimed that
    revision first.
    """
    JobService.get_job_for_user(job_id, user.id)
    return JobFileService.create_upload_url(
        job_id=job_id,
        owner_id=user.id,
        file_name=request.file_name,
        file_type=request.file_type,
    )


@router.post("/{job_id}/files", response_model=JobFileResponse, status_code=201)
def register_file(
    job_id: JobId,
    request: JobFileCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Record a finished upload on the job."""
    JobService.get_job_for_user(job_id, user.id)
    return JobFileService.register_file(
        job_id=job_id,
        file_key=request.file_key,
        file_name=request.file_name,
        file_size=request.file_size,
        uploaded_by=UploadedBy.USER,
        revision_number=request.revision_number,
    )


@router.post("/{job_id}/files/{file_id}/download-url", response_model=DownloadUrlResponse)
def create_download_url(
    job_id: JobId,
    file_id: FileId,
    user: AuthUser = Depends(get_current_user),
):
    JobService.get_job_for_user(job_id, user.id)
    return DownloadUrlResponse(download_url=JobFileService.create_download_url(file_id, job_id))


@router.delete("/{job_id}/files/{file_id}")
def delete_file(
    job_id: JobId,
    file_id: FileId,
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a file's row and its stored object.

    If the object can't be deleted the row is restored, so the file
    never half-disappears.
    """
    JobService.get_job_for_user(job_id, user.id)
    row = JobFileService.delete_file(file_id, job_id)
    return {"file_id": row["id"], "message": "File deleted successfully"}
