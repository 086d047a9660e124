# =============================================================================
# app/routers/client_portal.py - Client-Facing Endpoints
# =============================================================================
# What a logged-in client can see and do. Everything is scoped to the
# client_key carried in the client-session token.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import ClientPrincipal, get_current_client
from app.exceptions import ClientNotFoundError
from core.models.comment import CommentCreate, CommentResponse
from core.models.job import JobResponse
from core.models.job_file import (
    DownloadUrlResponse,
    JobFileCreate,
    JobFileResponse,
    JobUploadUrlRequest,
    JobUploadUrlResponse,
    UploadedBy,
)
from core.services.client_service import ClientService
from core.services.comment_service import CommentService
from core.services.job_file_service import JobFileService
from core.services.job_service import JobService

router = APIRouter()

JobId = Annotated[int, Path(description="Job id", ge=1)]


@router.get("/jobs", response_model=list[JobResponse])
def list_my_jobs(client: ClientPrincipal = Depends(get_current_client)):
    """The client's jobs, newest first."""
    return JobService.list_jobs(client.client_key)


@router.get("/jobs/{job_id}", response_model=JobResponse)
def get_my_job(job_id: JobId, client: ClientPrincipal = Depends(get_current_client)):
    return JobService.get_job_for_client(job_id, client.client_key)


@router.get("/jobs/{job_id}/comments", response_model=list[CommentResponse])
def list_comments(job_id: JobId, client: ClientPrincipal = Depends(get_current_client)):
    JobService.get_job_for_client(job_id, client.client_key)
    return CommentService.list_comments(job_id)


@router.post("/jobs/{job_id}/comments", response_model=CommentResponse, status_code=201)
def add_comment(
    job_id: JobId,
    request: CommentCreate,
    client: ClientPrincipal = Depends(get_current_client),
):
    """Post a comment as the client."""
    JobService.get_job_for_client(job_id, client.client_key)
    return CommentService.add_comment(job_id, request.comment, from_client=True)


@router.get("/jobs/{job_id}/files", response_model=list[JobFileResponse])
def list_files(job_id: JobId, client: ClientPrincipal = Depends(get_current_client)):
    JobService.get_job_for_client(job_id, client.client_key)
    return JobFileService.list_files(job_id)


@router.post("/jobs/{job_id}/files/upload-url", response_model=JobUploadUrlResponse)
def create_upload_url(
    job_id: JobId,
    request: JobUploadUrlRequest,
    client: ClientPrincipal = Depends(get_current_client),
):
    """
    Presign an upload for the job's next revision.

    The key sits under the provider who owns the job, next to the
    provider's own uploads.
    """
    JobService.get_job_for_client(job_id, client.client_key)
    owner = ClientService.get_client_by_key(client.client_key)
    if not owner:
        raise ClientNotFoundError(client.id)

    return JobFileService.create_upload_url(
        job_id=job_id,
        owner_id=owner["user_id"],
        file_name=request.file_name,
        file_type=request.file_type,
    )


@router.post("/jobs/{job_id}/files", response_model=JobFileResponse, status_code=201)
def register_file(
    job_id: JobId,
    request: JobFileCreate,
    client: ClientPrincipal = Depends(get_current_client),
):
    """Record a finished upload as coming from the client."""
    JobService.get_job_for_client(job_id, client.client_key)
    return JobFileService.register_file(
        job_id=job_id,
        file_key=request.file_key,
        file_name=request.file_name,
        file_size=request.file_size,
        uploaded_by=UploadedBy.CLIENT,
        revision_number=request.revision_number,
    )


@router.post("/jobs/{job_id}/files/{file_id}/download-url", response_model=DownloadUrlResponse)
def create_download_url(
    job_id: JobId,
    file_id: Annotated[int, Path(ge=1)],
    client: ClientPrincipal = Depends(get_current_client),
):
    JobService.get_job_for_client(job_id, client.client_key)
    return DownloadUrlResponse(download_url=JobFileService.create_download_url(file_id, job_id))
