# =============================================================================
# tests/test_object_store.py - Object Store Wrapper Tests
# =============================================================================
# This module contains tests for:
# - Object key layout
# - Presigned URL expiry (signed locally by botocore, no network)
# - Error wrapping of upstream failures
# =============================================================================

from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest

from app.config import settings
from lib.object_store import (
    PRESIGNED_URL_EXPIRY_SECONDS,
    ObjectStore,
    ObjectStoreError,
    build_object_key,
)


@pytest.fixture
def real_s3():
    """A real boto3 client built from the test settings."""
    ObjectStore.reset()
    yield ObjectStore.get_client()
    ObjectStore.reset()


# =============================================================================
# Key Layout
# =============================================================================

class TestBuildObjectKey:
    """Test build_object_key()."""

    def test_layout(self):
        key = build_object_key("u1", 42, 3, "final.mp4", timestamp_ms=1700000000000)

        assert key == "u1/42/revision-3/1700000000000-final.mp4"

    def test_timestamp_defaults_to_now_in_millis(self):
        with patch("lib.object_store.time.time", return_value=1700000000.5):
            key = build_object_key("u1", 42, 1, "a.mov")

        assert key == "u1/42/revision-1/1700000000500-a.mov"

    def test_file_name_kept_verbatim(self):
        key = build_object_key("u1", 42, 1, "my cut (v2).mp4", timestamp_ms=1)

        assert key.endswith("/1-my cut (v2).mp4")


# =============================================================================
# Presigning
# =============================================================================

class TestPresign:
    """Presigned URLs signed by a real botocore client."""

    def test_expiry_is_one_hour(self, real_s3):
        url = ObjectStore.presign_download("u1/42/revision-1/1-a.mp4")

        query = parse_qs(urlparse(url).query)
        assert PRESIGNED_URL_EXPIRY_SECONDS == 3600
        assert query["X-Amz-Expires"] == ["3600"]

    def test_upload_url_targets_bucket_and_key(self, real_s3):
        url = ObjectStore.presign_upload("u1/42/revision-1/1-a.mp4", "video/mp4")

        parsed = urlparse(url)
        assert "r2.cloudflarestorage.com" in parsed.netloc
        assert settings.R2_BUCKET_NAME in url
        assert "revision-1/1-a.mp4" in parsed.path

    def test_upload_passes_content_type(self, mock_s3):
        ObjectStore.presign_upload("k", "video/mp4")

        args, kwargs = mock_s3.generate_presigned_url.call_args
        assert args[0] == "put_object"
        assert kwargs["Params"] == {
            "Bucket": settings.R2_BUCKET_NAME,
            "Key": "k",
            "ContentType": "video/mp4",
        }
        assert kwargs["ExpiresIn"] == 3600

    def test_download_uses_get_object(self, mock_s3):
        ObjectStore.presign_download("k")

        args, kwargs = mock_s3.generate_presigned_url.call_args
        assert args[0] == "get_object"
        assert kwargs["Params"] == {"Bucket": settings.R2_BUCKET_NAME, "Key": "k"}

    def test_signing_failure_wrapped(self, mock_s3):
        mock_s3.generate_presigned_url.side_effect = RuntimeError("credentials rejected")

        with pytest.raises(ObjectStoreError) as exc_info:
            ObjectStore.presign_upload("k", "video/mp4")

        assert exc_info.value.message == "credentials rejected"


# =============================================================================
# Deletion
# =============================================================================

class TestDeleteObject:
    """Test ObjectStore.delete_object()."""

    def test_deletes_from_bucket(self, mock_s3):
        ObjectStore.delete_object("u1/42/revision-1/1-a.mp4")

        mock_s3.delete_object.assert_called_once_with(
            Bucket=settings.R2_BUCKET_NAME,
            Key="u1/42/revision-1/1-a.mp4",
        )

    def test_failure_keeps_upstream_message(self, mock_s3):
        mock_s3.delete_object.side_effect = RuntimeError("Access Denied")

        with pytest.raises(ObjectStoreError) as exc_info:
            ObjectStore.delete_object("k")

        assert exc_info.value.message == "Access Denied"

    def test_empty_upstream_message_falls_back(self, mock_s3):
        mock_s3.delete_object.side_effect = RuntimeError()

        with pytest.raises(ObjectStoreError) as exc_info:
            ObjectStore.delete_object("k")

        assert exc_info.value.message == "Failed to delete file"


class TestSettings:
    """Object store settings."""

    def test_endpoint_built_from_account(self):
        assert settings.r2_endpoint_url == f"https://{settings.CLOUDFLARE_ACCOUNT_ID}.r2.cloudflarestorage.com"

    def test_default_bucket(self):
        assert settings.R2_BUCKET_NAME == "job-videos"
