# =============================================================================
# lib/object_store.py - S3-Compatible Object Store Wrapper
# =============================================================================
# Wraps a boto3 S3 client pointed at Cloudflare R2.
#
# The service never streams file bytes itself: browsers upload and download
# directly through presigned URLs, and the service only deletes objects.
#
# Usage:
#   from lib.object_store import ObjectStore, build_object_key
#   key = build_object_key(user_id, job_id, 2, "cut.mp4")
#   url = ObjectStore.presign_upload(key, "video/mp4")
# =============================================================================

from __future__ import annotations

import logging
import time
from typing import Any

import boto3
from botocore.config import Config

from app.config import settings
from app.exceptions import ClientSideException

logger = logging.getLogger(__name__)

# Presigned URLs are valid for exactly one hour
PRESIGNED_URL_EXPIRY_SECONDS = 3600


class ObjectStoreError(ClientSideException):
    """Error during an object store call. Message is the upstream message."""

    def __init__(self, message: str, code: str = "OBJECT_STORE_ERROR", details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code=code,
            status_code=502,
            details=details,
        )


def build_object_key(
    user_id: str | int,
    job_id: str | int,
    revision_number: str | int,
    file_name: str,
    timestamp_ms: int | None = None,
) -> str:
    """
    Build the storage key for an uploaded file.

    Layout: {userId}/{jobId}/revision-{revisionNumber}/{epochMillis}-{fileName}

    Example:
        >>> build_object_key("u1", 42, 3, "final.mp4", timestamp_ms=1700000000000)
        'u1/42/revision-3/1700000000000-final.mp4'
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{user_id}/{job_id}/revision-{revision_number}/{timestamp_ms}-{file_name}"


class ObjectStore:
    """
    Singleton wrapper around the boto3 S3 client.

    All methods are class methods, mirroring SupabaseClient.
    """

    _instance: Any = None

    @classmethod
    def get_client(cls):
        """
        Get or create the singleton boto3 client for R2.

        Raises:
            ObjectStoreError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = boto3.client(
                    "s3",
                    region_name="auto",
                    endpoint_url=settings.r2_endpoint_url,
                    aws_access_key_id=settings.R2_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
                    config=Config(signature_version="s3v4"),
                )
                logger.info("Object store client initialized successfully")
            except Exception as e:
                raise ObjectStoreError(
                    message=f"Failed to create object store client: {e}",
                    code="CLIENT_INIT_FAILED",
                )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client."""
        cls._instance = None

    @classmethod
    def bucket(cls) -> str:
        return settings.R2_BUCKET_NAME

    @classmethod
    def presign_upload(cls, key: str, content_type: str) -> str:
        """
        Presign a PUT for `key`.

        The uploader must send the same Content-Type header or the
        signature won't match.

        Raises:
            ObjectStoreError: If signing fails
        """
        client = cls.get_client()

        try:
            return client.generate_presigned_url(
                "put_object",
                Params={"Bucket": cls.bucket(), "Key": key, "ContentType": content_type},
                ExpiresIn=PRESIGNED_URL_EXPIRY_SECONDS,
            )
        except Exception as e:
            logger.error(f"Upload URL generation failed for {key}: {e}")
            raise ObjectStoreError(str(e) or "Failed to generate upload URL", details={"key": key})

    @classmethod
    def presign_download(cls, key: str) -> str:
        """
        Presign a GET for `key`.

        The object's existence is not checked.

        Raises:
            ObjectStoreError: If signing fails
        """
        client = cls.get_client()

        try:
            return client.generate_presigned_url(
                "get_object",
                Params={"Bucket": cls.bucket(), "Key": key},
                ExpiresIn=PRESIGNED_URL_EXPIRY_SECONDS,
            )
        except Exception as e:
            logger.error(f"Download URL generation failed for {key}: {e}")
            raise ObjectStoreError(str(e) or "Failed to generate download URL", details={"key": key})

    @classmethod
    def delete_object(cls, key: str) -> None:
        """
        Delete one object.

        Raises:
            ObjectStoreError: If the delete call fails
        """
        client = cls.get_client()

        try:
            client.delete_object(Bucket=cls.bucket(), Key=key)
            logger.info(f"Deleted object: {key}")
        except Exception as e:
            logger.error(f"Object delete failed for {key}: {e}")
            raise ObjectStoreError(str(e) or "Failed to delete file", details={"key": key})

    @classmethod
    def check_bucket(cls) -> None:
        """HEAD the bucket; raises the upstream error if unreachable."""
        cls.get_client().head_bucket(Bucket=cls.bucket())
