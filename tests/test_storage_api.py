# =============================================================================
# tests/test_storage_api.py - Presigned URL Endpoint Tests
# =============================================================================
# Tests for POST /api/upload, /api/download and /api/delete:
# - Missing fields answer 400 without touching the object store
# - Upstream failures answer 500 {"error": message}
# =============================================================================

import re

import pytest


UPLOAD_BODY = {
    "fileName": "cut.mp4",
    "fileType": "video/mp4",
    "jobId": 42,
    "userId": "u-1",
    "revisionNumber": 2,
}


# =============================================================================
# Upload
# =============================================================================

class TestUploadEndpoint:
    """POST /api/upload"""

    def test_returns_url_and_key(self, api, mock_s3):
        response = api.post("/api/upload", json=UPLOAD_BODY)

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"uploadUrl", "key"}
        assert re.fullmatch(r"u-1/42/revision-2/\d+-cut\.mp4", body["key"])
        assert body["key"] in body["uploadUrl"]

    def test_signs_put_with_content_type(self, api, mock_s3):
        api.post("/api/upload", json=UPLOAD_BODY)

        args, kwargs = mock_s3.generate_presigned_url.call_args
        assert args[0] == "put_object"
        assert kwargs["Params"]["ContentType"] == "video/mp4"
        assert kwargs["ExpiresIn"] == 3600

    @pytest.mark.parametrize("field", list(UPLOAD_BODY))
    def test_missing_field_is_400(self, api, mock_s3, field):
        body = {k: v for k, v in UPLOAD_BODY.items() if k != field}

        response = api.post("/api/upload", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}
        mock_s3.generate_presigned_url.assert_not_called()

    def test_empty_string_is_missing(self, api, mock_s3):
        response = api.post("/api/upload", json={**UPLOAD_BODY, "fileName": ""})

        assert response.status_code == 400
        mock_s3.generate_presigned_url.assert_not_called()

    def test_upstream_failure_is_500(self, api, mock_s3):
        mock_s3.generate_presigned_url.side_effect = RuntimeError("SignatureDoesNotMatch")

        response = api.post("/api/upload", json=UPLOAD_BODY)

        assert response.status_code == 500
        assert response.json() == {"error": "SignatureDoesNotMatch"}

    @pytest.mark.parametrize("body", [["not", "an", "object"], "text", 7, None])
    def test_non_object_body_is_400(self, api, mock_s3, body):
        response = api.post("/api/upload", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}
        mock_s3.generate_presigned_url.assert_not_called()

    def test_no_body_is_400(self, api, mock_s3):
        response = api.post("/api/upload")

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_unparseable_body_is_500(self, api, mock_s3):
        response = api.post(
            "/api/upload",
            content=b"{fileName: oops",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert set(response.json()) == {"error"}
        mock_s3.generate_presigned_url.assert_not_called()

    def test_non_string_values_become_key_text(self, api, mock_s3):
        response = api.post("/api/upload", json={**UPLOAD_BODY, "fileName": 123, "userId": 9})

        assert response.status_code == 200
        assert re.fullmatch(r"9/42/revision-2/\d+-123", response.json()["key"])


# =============================================================================
# Download
# =============================================================================

class TestDownloadEndpoint:
    """POST /api/download"""

    def test_returns_url(self, api, mock_s3):
        response = api.post("/api/download", json={"fileKey": "u-1/42/revision-2/1-cut.mp4"})

        assert response.status_code == 200
        assert response.json()["downloadUrl"].startswith("https://signed.example/u-1/42/")
        args, _ = mock_s3.generate_presigned_url.call_args
        assert args[0] == "get_object"

    @pytest.mark.parametrize("body", [{}, {"fileKey": ""}, {"fileKey": None}])
    def test_missing_key_is_400(self, api, mock_s3, body):
        response = api.post("/api/download", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "File key is required"}
        mock_s3.generate_presigned_url.assert_not_called()

    def test_numeric_key_accepted(self, api, mock_s3):
        response = api.post("/api/download", json={"fileKey": 12345})

        assert response.status_code == 200
        _, kwargs = mock_s3.generate_presigned_url.call_args
        assert kwargs["Params"]["Key"] == "12345"

    def test_upstream_failure_is_500(self, api, mock_s3):
        mock_s3.generate_presigned_url.side_effect = RuntimeError("bucket gone")

        response = api.post("/api/download", json={"fileKey": "k"})

        assert response.status_code == 500
        assert response.json() == {"error": "bucket gone"}


# =============================================================================
# Delete
# =============================================================================

class TestDeleteEndpoint:
    """POST /api/delete"""

    def test_deletes_object(self, api, mock_s3):
        response = api.post("/api/delete", json={"fileKey": "u-1/42/revision-2/1-cut.mp4"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        mock_s3.delete_object.assert_called_once_with(
            Bucket="job-videos",
            Key="u-1/42/revision-2/1-cut.mp4",
        )

    @pytest.mark.parametrize("kwargs", [{}, {"json": {}}, {"json": [1, 2]}])
    def test_missing_key_is_400(self, api, mock_s3, kwargs):
        response = api.post("/api/delete", **kwargs)

        assert response.status_code == 400
        assert response.json() == {"error": "File key is required"}
        mock_s3.delete_object.assert_not_called()

    def test_unparseable_body_is_500(self, api, mock_s3):
        response = api.post(
            "/api/delete",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert set(response.json()) == {"error"}
        mock_s3.delete_object.assert_not_called()

    def test_upstream_failure_is_500(self, api, mock_s3):
        mock_s3.delete_object.side_effect = RuntimeError("Access Denied")

        response = api.post("/api/delete", json={"fileKey": "k"})

        assert response.status_code == 500
        assert response.json() == {"error": "Access Denied"}
