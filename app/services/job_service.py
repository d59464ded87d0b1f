"""
Job Service - owner-scoped CRUD and statistics over the jobs collection.

Every method takes the caller's user id and puts it in the store filter.
A job that exists but belongs to someone else is reported exactly like a
job that does not exist.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from app.core.errors import NotFoundError, ValidationError
from app.schemas.schemas import (
    JobCreate,
    JobListQuery,
    JobListResponse,
    JobResponse,
    JobStatus,
    JobUpdate,
    MonthlyApplication,
    StatsResponse,
    StatusStats,
)
from app.services import job_query

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ("company", "position")


# ============================================================
# HELPERS: Mongo document <-> API schema
# ============================================================

def as_stored_time(value: datetime) -> datetime:
    """BSON dates keep milliseconds and come back naive; present them as UTC."""
    value = value.replace(microsecond=value.microsecond // 1000 * 1000)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def serialize_job(doc: dict) -> JobResponse:
    """Convert a job document to its API representation."""
    return JobResponse(
        id=str(doc["_id"]),
        company=doc["company"],
        position=doc["position"],
        status=doc["status"],
        job_type=doc["job_type"],
        created_by=doc["created_by"],
        created_at=as_stored_time(doc["created_at"]),
        updated_at=as_stored_time(doc["updated_at"]),
    )


def month_label(year: int, month: int) -> str:
    """e.g. (2024, 3) -> "Mar 2024"."""
    return datetime(year, month, 1).strftime("%b %Y")


def _not_found(job_id: str) -> NotFoundError:
    return NotFoundError(f"No job with id {job_id}")


def _object_id(job_id: str) -> ObjectId:
    # A malformed id cannot match anything; report it like a missing job
    try:
        return ObjectId(job_id)
    except (InvalidId, TypeError):
        raise _not_found(job_id)


class JobService:
    """
    Handles the jobs collection.

    The collection is injected, so the same service runs against a real
    MongoClient or an in-memory one.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def list_jobs(self, caller_id: int, query: JobListQuery) -> JobListResponse:
        mongo_filter = job_query.build_job_filter(caller_id, query)
        skip, limit = job_query.pagination(query.page, query.limit)

        cursor = (
            self.collection.find(mongo_filter)
            .sort(job_query.build_job_sort(query.sort))
            .skip(skip)
            .limit(limit)
        )
        jobs = [serialize_job(doc) for doc in cursor]
        total_jobs = self.collection.count_documents(mongo_filter)

        return JobListResponse(
            jobs=jobs,
            total_jobs=total_jobs,
            num_of_pages=math.ceil(total_jobs / limit),
        )

    def get_job(self, caller_id: int, job_id: str) -> JobResponse:
        doc = self.collection.find_one({"_id": _object_id(job_id), "created_by": caller_id})
        if not doc:
            raise _not_found(job_id)
        return serialize_job(doc)

    def create_job(
        self,
        caller_id: int,
        payload: JobCreate,
        created_at: Optional[datetime] = None,
    ) -> JobResponse:
        """
        Insert a job owned by caller_id.

        Args:
            caller_id: authenticated user; any owner in the payload is ignored
            payload: validated request body
            created_at: only set by the seeding script to backfill history
        """
        errors: List[str] = []
        for field in REQUIRED_TEXT_FIELDS:
            value = getattr(payload, field)
            if value is None or not value.strip():
                errors.append(f"Please provide {field}")
        if errors:
            raise ValidationError(errors)

        now = datetime.now(timezone.utc)
        doc = {
            "company": payload.company.strip(),
            "position": payload.position.strip(),
            "status": payload.status.value,
            "job_type": payload.job_type.value,
            "created_by": caller_id,
            "created_at": created_at or now,
            "updated_at": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info("Created job %s for user %s", result.inserted_id, caller_id)
        return serialize_job(doc)

    def update_job(self, caller_id: int, job_id: str, payload: JobUpdate) -> JobResponse:
        changes: Dict[str, Any] = payload.model_dump(exclude_unset=True)

        errors: List[str] = []
        for field, value in changes.items():
            if value is None or (field in REQUIRED_TEXT_FIELDS and not value.strip()):
                errors.append(f"{field} cannot be empty")
        if errors:
            raise ValidationError(errors)

        updates: Dict[str, Any] = {}
        for field, value in changes.items():
            updates[field] = value.strip() if field in REQUIRED_TEXT_FIELDS else value.value
        updates["updated_at"] = datetime.now(timezone.utc)

        # Single atomic round trip: no gap between the ownership check and the write
        doc = self.collection.find_one_and_update(
            {"_id": _object_id(job_id), "created_by": caller_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise _not_found(job_id)

        logger.info("Updated job %s for user %s (%s)", job_id, caller_id, ", ".join(sorted(changes)))
        return serialize_job(doc)

    def delete_job(self, caller_id: int, job_id: str) -> None:
        doc = self.collection.find_one_and_delete({"_id": _object_id(job_id), "created_by": caller_id})
        if not doc:
            raise _not_found(job_id)
        logger.info("Deleted job %s for user %s", job_id, caller_id)

    def show_stats(self, caller_id: int) -> StatsResponse:
        counts = {
            row["_id"]: row["count"]
            for row in self.collection.aggregate(job_query.status_breakdown_pipeline(caller_id))
        }
        # All three statuses are always present, zero when unused
        default_stats = StatusStats(**{status.value: counts.get(status.value, 0) for status in JobStatus})

        monthly = [
            MonthlyApplication(
                date=month_label(row["_id"]["year"], row["_id"]["month"]),
                count=row["count"],
            )
            for row in self.collection.aggregate(job_query.monthly_applications_pipeline(caller_id))
        ]
        # Pipeline returns newest first; present oldest first
        monthly.reverse()

        return StatsResponse(default_stats=default_stats, monthly_applications=monthly)
