# =============================================================================
# app/routers/storage.py - Presigned URL Endpoints
# =============================================================================
# POST /api/upload, /api/download and /api/delete.
#
# These keep a small fixed contract used directly by browsers: camelCase
# JSON bodies in, and either a result or {"error": message} out. The body is
# read by hand so that no request shape falls through to a 422:
# - empty body, null, or a non-object -> every field missing -> 400
# - body that isn't JSON -> 500
# Authorization of the job/user ids is the caller's job.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from app.exceptions import StorageApiError, StorageRequestError
from core.models.job_file import (
    DeleteResponse,
    DownloadUrlContractResponse,
    FileKeyRequest,
    UploadUrlRequest,
    UploadUrlResponse,
)
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


def _upstream_error(exc: Exception, fallback: str) -> StorageApiError:
    message = getattr(exc, "message", None) or str(exc) or fallback
    return StorageApiError(message)


async def _read_fields(request: Request) -> dict[str, Any]:
    """
    The request body as a dict of fields.

    Raises:
        StorageApiError: 500 if the body is not valid JSON
    """
    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        data = await request.json()
    except ValueError as e:
        logger.warning(f"Unparseable body on {request.url.path}: {e}")
        raise StorageApiError(str(e) or "Invalid JSON body")

    return data if isinstance(data, dict) else {}


@router.post("/upload", response_model=UploadUrlResponse)
async def create_upload_url(request: Request):
    """
    Issue a presigned PUT URL.

    Body: `{fileName, fileType, jobId, userId, revisionNumber}`, all required.
    The object key is `{userId}/{jobId}/revision-{revisionNumber}/{epochMillis}-{fileName}`
    and the URL expires after one hour.
    """
    body = UploadUrlRequest.model_validate(await _read_fields(request))
    if not body.is_complete():
        raise StorageRequestError("Missing required fields")

    try:
        upload_url, key = await run_in_threadpool(
            StorageService.create_upload_url,
            file_name=str(body.fileName),
            file_type=str(body.fileType),
            job_id=str(body.jobId),
            user_id=str(body.userId),
            revision_number=str(body.revisionNumber),
        )
    except Exception as e:
        logger.error(f"Upload URL generation error: {e}")
        raise _upstream_error(e, "Failed to generate upload URL")

    return UploadUrlResponse(uploadUrl=upload_url, key=key)


@router.post("/download", response_model=DownloadUrlContractResponse)
async def create_download_url(request: Request):
    """Issue a presigned GET URL for `{fileKey}`, valid for one hour."""
    body = FileKeyRequest.model_validate(await _read_fields(request))
    if not body.fileKey:
        raise StorageRequestError("File key is required")

    try:
        download_url = await run_in_threadpool(StorageService.create_download_url, str(body.fileKey))
    except Exception as e:
        logger.error(f"Download URL generation error: {e}")
        raise _upstream_error(e, "Failed to generate download URL")

    return DownloadUrlContractResponse(downloadUrl=download_url)


@router.post("/delete", response_model=DeleteResponse)
async def delete_file(request: Request):
    """Delete the object at `{fileKey}`. The job_files row, if any, is left alone."""
    body = FileKeyRequest.model_validate(await _read_fields(request))
    if not body.fileKey:
        raise StorageRequestError("File key is required")

    try:
        await run_in_threadpool(StorageService.delete_file, str(body.fileKey))
    except Exception as e:
        logger.error(f"Delete error: {e}")
        raise _upstream_error(e, "Failed to delete file")

    return DeleteResponse(success=True)
