"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Field names are snake_case in Python and camelCase on the wire
(job_type <-> jobType, total_jobs <-> totalJobs, ...).
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# ============================================================
# ENUMS
# ============================================================

class JobStatus(str, Enum):
    pending = "pending"
    interview = "interview"
    declined = "declined"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"
    remote = "remote"


class SortOption(str, Enum):
    latest = "latest"
    oldest = "oldest"
    a_z = "a-z"
    z_a = "z-a"


# Sentinel accepted by the status / jobType filters
ALL = "all"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# AUTH SCHEMAS
# Fields are optional here; AuthService reports every missing or
# invalid field in one ValidationError.
# ============================================================

class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UpdateUserRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    name: str
    email: str


class AuthResponse(BaseModel):
    user: UserSummary
    token: str


class CurrentUser(BaseModel):
    """Identity decoded from a session token."""
    user_id: int
    name: str
    is_demo: bool = False


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    # Unknown keys (e.g. a client-supplied createdBy) are ignored
    company: Optional[str] = None
    position: Optional[str] = None
    status: JobStatus = JobStatus.pending
    job_type: JobType = JobType.full_time


class JobUpdate(CamelModel):
    company: Optional[str] = None
    position: Optional[str] = None
    status: Optional[JobStatus] = None
    job_type: Optional[JobType] = None


class JobResponse(CamelModel):
    id: str
    company: str
    position: str
    status: JobStatus
    job_type: JobType
    created_by: int
    created_at: datetime
    updated_at: datetime


class JobEnvelope(BaseModel):
    job: JobResponse


class JobListQuery(CamelModel):
    search: Optional[str] = None
    status: str = ALL
    job_type: str = ALL
    sort: str = SortOption.latest.value
    page: int = 1
    limit: int = 10


class JobListResponse(CamelModel):
    jobs: List[JobResponse]
    total_jobs: int
    num_of_pages: int


# ============================================================
# STATS SCHEMAS
# ============================================================

class StatusStats(BaseModel):
    pending: int = 0
    interview: int = 0
    declined: int = 0


class MonthlyApplication(BaseModel):
    date: str
    count: int


class StatsResponse(CamelModel):
    default_stats: StatusStats
    monthly_applications: List[MonthlyApplication]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class HealthResponse(BaseModel):
    status: str
    postgres: str
    mongodb: str
