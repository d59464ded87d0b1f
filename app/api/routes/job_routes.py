"""
Job Routes

GET    /jobs        - List own jobs with filters, sorting and pagination
POST   /jobs        - Create job
GET    /jobs/stats  - Status breakdown and monthly applications
GET    /jobs/{id}   - Get one job
PATCH  /jobs/{id}   - Update one job
DELETE /jobs/{id}   - Delete one job

All routes need a token; every query is scoped to the caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user, get_job_service, require_writable_user
from app.schemas.schemas import (
    ALL,
    CurrentUser,
    JobCreate,
    JobEnvelope,
    JobListQuery,
    JobListResponse,
    JobUpdate,
    MessageResponse,
    SortOption,
    StatsResponse,
)
from app.services.job_query import MAX_BSON_INT
from app.services.job_service import JobService

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse)
def list_jobs(
    search: Optional[str] = Query(None, description="Case-insensitive match on position"),
    status_filter: str = Query(ALL, alias="status", description="pending, interview, declined or all"),
    job_type: str = Query(ALL, alias="jobType", description="full-time, part-time, internship, remote or all"),
    sort: str = Query(SortOption.latest.value, description="latest, oldest, a-z or z-a"),
    page: int = Query(1, ge=1, le=MAX_BSON_INT),
    limit: int = Query(10, ge=1, le=MAX_BSON_INT),
    user: CurrentUser = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """List the caller's jobs with filters and pagination."""
    query = JobListQuery(
        search=search,
        status=status_filter,
        job_type=job_type,
        sort=sort,
        page=page,
        limit=limit,
    )
    return jobs.list_jobs(user.user_id, query)


@router.post("", response_model=JobEnvelope, status_code=status.HTTP_201_CREATED)
def create_job(
    job: JobCreate,
    user: CurrentUser = Depends(require_writable_user),
    jobs: JobService = Depends(get_job_service),
):
    """Create a job owned by the caller."""
    return JobEnvelope(job=jobs.create_job(user.user_id, job))


# Declared before /{job_id} so "stats" is not taken for an id
@router.get("/stats", response_model=StatsResponse)
def show_stats(
    user: CurrentUser = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """Counts per status and per month (last 6 months with activity)."""
    return jobs.show_stats(user.user_id)


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(
    job_id: str,
    user: CurrentUser = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """Get details of a specific job."""
    return JobEnvelope(job=jobs.get_job(user.user_id, job_id))


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: str,
    update: JobUpdate,
    user: CurrentUser = Depends(require_writable_user),
    jobs: JobService = Depends(get_job_service),
):
    """Update a job. Only the owner can update."""
    return JobEnvelope(job=jobs.update_job(user.user_id, job_id, update))


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: str,
    user: CurrentUser = Depends(require_writable_user),
    jobs: JobService = Depends(get_job_service),
):
    """Delete a job. Only the owner can delete."""
    jobs.delete_job(user.user_id, job_id)
    return MessageResponse(message="Success! Job removed")
