# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .auth_service import AuthService
from .client_service import ClientService, generate_client_key
from .comment_service import CommentService
from .job_file_service import JobFileService
from .job_service import JobService
from .storage_service import StorageService

__all__ = [
    "AuthService",
    "ClientService",
    "CommentService",
    "JobFileService",
    "JobService",
    "StorageService",
    "generate_client_key",
]
