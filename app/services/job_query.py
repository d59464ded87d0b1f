"""
Job query builder.

Turns a validated JobListQuery into Mongo filter / sort specs, and builds the
two aggregation pipelines used by the stats endpoint. Enum values are checked
here, before anything reaches the store.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING

from app.core.errors import ValidationError
from app.schemas.schemas import ALL, JobListQuery, JobStatus, JobType, SortOption

MONTHS_OF_HISTORY = 6

# skip and limit travel as BSON int64
MAX_BSON_INT = 2**63 - 1

SORT_SPECS: Dict[SortOption, List[Tuple[str, int]]] = {
    SortOption.latest: [("created_at", DESCENDING), ("_id", DESCENDING)],
    SortOption.oldest: [("created_at", ASCENDING), ("_id", ASCENDING)],
    SortOption.a_z: [("position", ASCENDING), ("_id", ASCENDING)],
    SortOption.z_a: [("position", DESCENDING), ("_id", DESCENDING)],
}


def _enum_filter(value: str, enum_cls, field: str, errors: List[str]):
    """Return the enum member for value, None for "all" or an empty value."""
    if not value or value == ALL:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join([ALL] + [member.value for member in enum_cls])
        errors.append(f"{field} must be one of: {allowed}")
        return None


def validate_list_query(query: JobListQuery) -> Tuple[Optional[JobStatus], Optional[JobType]]:
    """
    Check every list parameter and return the parsed status / jobType filters.

    Raises:
        ValidationError: listing every bad parameter
    """
    errors: List[str] = []
    status = _enum_filter(query.status, JobStatus, "status", errors)
    job_type = _enum_filter(query.job_type, JobType, "jobType", errors)
    if query.page < 1:
        errors.append("page must be at least 1")
    if query.limit < 1:
        errors.append("limit must be at least 1")
    elif query.limit > MAX_BSON_INT:
        errors.append("limit is too large")
    elif query.page > 1 and (query.page - 1) * query.limit > MAX_BSON_INT:
        errors.append("page is out of range")
    if errors:
        raise ValidationError(errors)
    return status, job_type


def build_job_filter(owner_id: int, query: JobListQuery) -> Dict[str, Any]:
    """Owner-scoped filter with the optional search / status / jobType parts."""
    status, job_type = validate_list_query(query)

    mongo_filter: Dict[str, Any] = {"created_by": owner_id}
    if query.search:
        # Literal substring match, not a user supplied regex
        mongo_filter["position"] = {"$regex": re.escape(query.search), "$options": "i"}
    if status is not None:
        mongo_filter["status"] = status.value
    if job_type is not None:
        mongo_filter["job_type"] = job_type.value
    return mongo_filter


def parse_sort(sort: str) -> SortOption:
    """Unknown sort keys fall back to newest first."""
    try:
        return SortOption(sort)
    except ValueError:
        return SortOption.latest


def build_job_sort(sort: str) -> List[Tuple[str, int]]:
    return SORT_SPECS[parse_sort(sort)]


def pagination(page: int, limit: int) -> Tuple[int, int]:
    """(skip, limit) for a 1-based page number."""
    return (page - 1) * limit, limit


def status_breakdown_pipeline(owner_id: int) -> List[Dict[str, Any]]:
    return [
        {"$match": {"created_by": owner_id}},
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
    ]


def monthly_applications_pipeline(owner_id: int, months: int = MONTHS_OF_HISTORY) -> List[Dict[str, Any]]:
    """Counts per (year, month) of created_at, most recent `months` first."""
    return [
        {"$match": {"created_by": owner_id}},
        {
            "$group": {
                "_id": {
                    "year": {"$year": "$created_at"},
                    "month": {"$month": "$created_at"},
                },
                "count": {"$sum": 1},
            }
        },
        {"$sort": {"_id.year": -1, "_id.month": -1}},
        {"$limit": months},
    ]
