# =============================================================================
# core/models/job.py - Job Schemas
# =============================================================================
# A job is a unit of work for one client, with a price and the number of
# revisions the client is allowed. Job fields don't change after creation;
# all later activity goes through comments and files.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class JobCreate(BaseModel):
    """
    Schema for creating a job under a client.

    Example:
        {
            "job_name": "Launch video",
            "price": 1500.0,
            "number_rev": 3,
            "description": "60s product teaser"
        }
    """

    job_name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0, description="Agreed price")
    number_rev: int = Field(..., ge=0, description="Number of revisions included")
    description: str = Field(..., min_length=1)

    @field_validator("job_name", "description", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class JobResponse(BaseModel):
    """Schema for returning a job row."""

    job_id: int
    client_key: int
    job_name: str
    price: float
    number_rev: int
    description: str
    created_at: datetime | None = None


class JobDetail(JobResponse):
    """A job together with the name of the client it belongs to."""

    client_id: int | None = None
    client_name: str | None = None
