# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for data validation
# - services/: Clients, jobs, comments, job files, logins and presigned URLs
#
# Services raise ClientSideException subclasses and never build HTTP
# responses; routers in app/ stay thin.
# =============================================================================
