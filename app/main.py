# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the ClientSide API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    ClientSideException,
    clientside_exception_handler,
    validation_exception_handler,
)
from app.routers import health, storage, clients, jobs, client_portal
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Clients for Supabase and the object store are created lazily on first
    use, so startup only reports the configuration.
    """
    logger.info(f"Starting ClientSide API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Object store bucket: {settings.R2_BUCKET_NAME}")

    yield

    logger.info("Shutting down ClientSide API")


# Create FastAPI application
app = FastAPI(
    title="ClientSide API",
    description="""
## Client & Job Management API

Providers manage their clients and the jobs they deliver; clients log in
with an emailed key to follow their jobs, comment, and fetch files.

### Logins

| Who | Endpoint | Credentials |
|-----|----------|-------------|
| **Provider** | `POST /api/v1/auth/login/user` | email + password |
| **Client** | `POST /api/v1/auth/login/client` | email + 8-digit client key |

Send the returned `access_token` as `Authorization: Bearer <token>`.

### Files

Files never pass through this API. Ask for a presigned URL, then PUT or GET
the object store directly. URLs expire after one hour.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Provider and client logins",
        },
        {
            "name": "Storage",
            "description": "Presigned upload/download URLs and object deletion",
        },
        {
            "name": "Clients",
            "description": "Create and manage clients",
        },
        {
            "name": "Jobs",
            "description": "Jobs, comments and file revisions (provider side)",
        },
        {
            "name": "Client Portal",
            "description": "Jobs, comments and files (client side)",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ClientSideException)
async def handle_clientside_exception(request: Request, exc: ClientSideException):
    """Handle custom ClientSide exceptions."""
    return await clientside_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle request body/path validation failures."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Presigned URL endpoints (fixed public contract)
app.include_router(
    storage.router,
    prefix="/api",
    tags=["Storage"]
)

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Client management endpoints
app.include_router(
    clients.router,
    prefix="/api/v1/clients",
    tags=["Clients"]
)

# Job endpoints (provider side)
app.include_router(
    jobs.router,
    prefix="/api/v1/jobs",
    tags=["Jobs"]
)

# Client portal endpoints
app.include_router(
    client_portal.router,
    prefix="/api/v1/client",
    tags=["Client Portal"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "ClientSide API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
