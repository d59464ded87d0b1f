#!/usr/bin/env python3
"""
Populate Script

Loads jobs from a JSON file into MongoDB for an existing user.
Usage:
    python scripts/populate.py --file mock-data.json --email demo@example.com
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, '.')

from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.db.mongodb import MongoDatabase
from app.db.postgres import PostgresDatabase
from app.db.seed import load_seed_file, parse_record, populate_jobs
from app.services.job_service import JobService
from app.services.user_service import UserService


def main():
    parser = argparse.ArgumentParser(description="Load jobs from a JSON file for one user")
    parser.add_argument("--file", type=Path, default=Path("mock-data.json"),
                        help="Path to a JSON array of jobs")
    parser.add_argument("--email", required=True,
                        help="Email of the user who will own the jobs")
    parser.add_argument("--dry-run", action="store_true",
                        help="Validate the file without writing")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level, settings.json_logs)

    if not args.file.exists():
        print(f"❌ File not found: {args.file}")
        sys.exit(1)

    records = load_seed_file(args.file)
    print(f"Found {len(records)} jobs in {args.file}")

    if args.dry_run:
        invalid = 0
        for record in records:
            try:
                parse_record(record)
            except ValueError:
                invalid += 1
        print(f"[DRY RUN] {len(records) - invalid} valid, {invalid} invalid")
        return

    postgres = PostgresDatabase.from_url(settings.postgres_url)
    mongo = MongoDatabase.from_uri(settings.mongodb_uri, settings.mongodb_db)
    try:
        user = UserService(postgres).get_by_email(args.email)
        if not user:
            print(f"❌ No user with email {args.email}. Register first.")
            sys.exit(1)

        created, skipped = populate_jobs(JobService(mongo.get_collection("jobs")), user["user_id"], records)
        print(f"✅ Uploaded {len(created)} jobs ({skipped} skipped)")
    finally:
        mongo.close()
        postgres.close()


if __name__ == "__main__":
    main()
