"""
Schemas module - Request/Response schemas for API endpoints.

Difference from the stored documents:
- Documents: what Mongo/Postgres hold (snake_case, ObjectId, owner id)
- Schemas: API contract (what client sends/receives)
"""

from app.schemas.schemas import (
    AuthResponse,
    CurrentUser,
    JobCreate,
    JobListQuery,
    JobListResponse,
    JobResponse,
    JobStatus,
    JobType,
    JobUpdate,
    SortOption,
    StatsResponse,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "JobCreate",
    "JobListQuery",
    "JobListResponse",
    "JobResponse",
    "JobStatus",
    "JobType",
    "JobUpdate",
    "SortOption",
    "StatsResponse",
]
