"""
Seed data loader.

Reads a JSON array of job records and inserts them for one owner. Records
may use camelCase (jobType, createdAt) or snake_case keys; createdAt lets a
demo account have months of history for the stats page.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError as SchemaValidationError

from app.core.errors import ValidationError
from app.schemas.schemas import JobCreate, JobResponse
from app.services.job_service import JobService

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def load_seed_file(path: Path) -> List[dict]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of jobs")
    return data


def parse_record(record: dict) -> Tuple[JobCreate, Optional[datetime]]:
    """Validate one record with the same schema the API uses."""
    created_at = parse_timestamp(record.get("createdAt") or record.get("created_at"))
    return JobCreate.model_validate(record), created_at


def populate_jobs(service: JobService, owner_id: int, records: List[dict]) -> Tuple[List[JobResponse], int]:
    """
    Insert records for owner_id.

    Returns:
        (created jobs, number of skipped invalid records)
    """
    created: List[JobResponse] = []
    skipped = 0
    for index, record in enumerate(records):
        try:
            payload, created_at = parse_record(record)
            created.append(service.create_job(owner_id, payload, created_at=created_at))
        except (SchemaValidationError, ValidationError, ValueError) as e:
            logger.warning("Skipping record %d: %s", index, e)
            skipped += 1
    logger.info("Seeded %d jobs for user %s (%d skipped)", len(created), owner_id, skipped)
    return created, skipped
