# =============================================================================
# app/routers/clients.py - Client CRUD Endpoints
# =============================================================================
# Provider-facing client management. All endpoints require a user login and
# only ever touch clients the user owns.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import AuthUser, get_current_user
from core.models.client import ClientCreate, ClientResponse, ClientUpdate
from core.models.job import JobCreate, JobResponse
from core.services.client_service import ClientService
from core.services.job_service import JobService

router = APIRouter()

ClientId = Annotated[int, Path(description="Client id", ge=1)]


@router.get("", response_model=list[ClientResponse])
def list_clients(user: AuthUser = Depends(get_current_user)):
    """List the user's clients, sorted by name."""
    return ClientService.list_clients(user.id)


@router.post("", response_model=ClientResponse, status_code=201)
def create_client(
    request: ClientCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a client.

    The 8-digit `client_key` is generated here; share it with the client
    so they can log in.
    """
    return ClientService.create_client(
        user_id=user.id,
        client_name=request.client_name,
        client_email=request.client_email,
    )


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: ClientId, user: AuthUser = Depends(get_current_user)):
    return ClientService.get_client(client_id, user.id)


@router.patch("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: ClientId,
    request: ClientUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Change a client's name or login email. The key never changes."""
    return ClientService.update_client(
        client_id,
        user.id,
        client_name=request.client_name,
        client_email=request.client_email,
    )


@router.delete("/{client_id}")
def delete_client(client_id: ClientId, user: AuthUser = Depends(get_current_user)):
    """
    Delete a client together with all of its jobs.

    Jobs are removed first; if that fails the client is kept.
    """
    client = ClientService.delete_client(client_id, user.id)
    return {
        "client_id": client["id"],
        "message": "Client deleted successfully",
    }


# =============================================================================
# Jobs under a client
# =============================================================================

@router.get("/{client_id}/jobs", response_model=list[JobResponse])
def list_client_jobs(client_id: ClientId, user: AuthUser = Depends(get_current_user)):
    """Jobs of a client, newest first."""
    return JobService.list_jobs_for_user(client_id, user.id)


@router.post("/{client_id}/jobs", response_model=JobResponse, status_code=201)
def create_job(
    client_id: ClientId,
    request: JobCreate,
    user: AuthUser = Depends(get_current_user),
):
    return JobService.create_job(
        client_id=client_id,
        user_id=user.id,
        job_name=request.job_name,
        price=request.price,
        number_rev=request.number_rev,
        description=request.description,
    )
