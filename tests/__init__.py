# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the ClientSide API:
# - test_models.py: Pydantic model validation
# - test_object_store.py / test_storage_api.py: presigned URLs and deletion
# - test_saga.py: compensating step runner
# - test_auth.py: user and client logins, tokens
# - test_clients.py / test_jobs.py / test_job_files.py: services and endpoints
# - test_config.py: settings validation
# - test_health.py: liveness and readiness
#
# Run tests with: pytest
# =============================================================================
