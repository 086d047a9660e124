# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - storage.py: Presigned upload/download/delete endpoints (/api/*)
# - clients.py: Client CRUD and job creation for providers
# - jobs.py: Job details, comments and files for providers
# - client_portal.py: Job, comment and file access for logged-in clients
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import storage
from . import clients
from . import jobs
from . import client_portal

__all__ = [
    "health",
    "storage",
    "clients",
    "jobs",
    "client_portal",
]
