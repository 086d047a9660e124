# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable wrappers around external services:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - object_store.py: boto3 wrapper for the S3-compatible object store
# - saga.py: Step runner with compensating actions for multi-call deletes
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.object_store import ObjectStore, ObjectStoreError, build_object_key
from lib.saga import Saga, SagaResult

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Object store
    "ObjectStore",
    "ObjectStoreError",
    "build_object_key",
    # Saga
    "Saga",
    "SagaResult",
]
