"""
User Service - credential store operations on the PostgreSQL users table.

Only AuthService talks to this module; password hashes never leave it in an
API response.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError

from app.core.errors import DuplicateError
from app.db.postgres import PostgresDatabase, users_table

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Reads and writes user rows. Emails are stored lower-cased."""

    def __init__(self, postgres: PostgresDatabase):
        self.postgres = postgres

    def get_by_email(self, email: str) -> Optional[dict]:
        with self.postgres.session() as db:
            row = db.execute(
                select(users_table).where(users_table.c.email == normalize_email(email))
            ).fetchone()
        return dict(row._mapping) if row else None

    def email_taken(self, email: str, exclude_user_id: Optional[int] = None) -> bool:
        """True if some user (other than exclude_user_id) already has this email."""
        query = select(func.count()).select_from(users_table).where(
            users_table.c.email == normalize_email(email)
        )
        if exclude_user_id is not None:
            query = query.where(users_table.c.user_id != exclude_user_id)
        with self.postgres.session() as db:
            return db.execute(query).scalar_one() > 0

    def create(self, name: str, email: str, password_hash: str) -> dict:
        """
        Insert a user.

        Raises:
            DuplicateError: the unique email constraint fired (lost a race with
                another registration for the same address)
        """
        now = datetime.now(timezone.utc)
        try:
            with self.postgres.session() as db:
                row = db.execute(
                    insert(users_table)
                    .values(
                        name=name,
                        email=normalize_email(email),
                        password_hash=password_hash,
                        created_at=now,
                        updated_at=now,
                    )
                    .returning(*users_table.c)
                ).fetchone()
        except IntegrityError:
            logger.info("Duplicate email on insert: %s", email)
            raise DuplicateError("email")
        return dict(row._mapping)

    def update(self, user_id: int, **values) -> Optional[dict]:
        """Update the given columns; returns the new row, or None if the user is gone."""
        if "email" in values:
            values["email"] = normalize_email(values["email"])
        values["updated_at"] = datetime.now(timezone.utc)
        try:
            with self.postgres.session() as db:
                row = db.execute(
                    update(users_table)
                    .where(users_table.c.user_id == user_id)
                    .values(**values)
                    .returning(*users_table.c)
                ).fetchone()
        except IntegrityError:
            logger.info("Duplicate email on update for user %s", user_id)
            raise DuplicateError("email")
        return dict(row._mapping) if row else None
