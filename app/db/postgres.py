"""
PostgreSQL Connection Utility

PostgreSQL stores the user accounts (credentials). The handle is built once
at startup and passed to whoever needs it; there is no module-level engine.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(20), nullable=False),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("password_hash", String(255), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


class PostgresDatabase:
    """Owns the engine and session factory for the credential store."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "PostgresDatabase":
        # pool_size=5: maintain 5 connections ready
        # max_overflow=10: allow 10 extra connections under load
        engine = create_engine(
            url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            echo=echo,
        )
        return cls(engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Context manager for database sessions.
        Usage:
            with postgres.session() as db:
                db.execute(select(users_table))
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_schema(self) -> None:
        """Create the users table if it does not exist yet."""
        metadata.create_all(bind=self.engine)
        logger.info("PostgreSQL schema initialized")

    def ping(self) -> bool:
        """
        Test if PostgreSQL is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            with self.session() as db:
                row = db.execute(text("SELECT 1")).fetchone()
                return row[0] == 1
        except SQLAlchemyError as e:
            logger.error("PostgreSQL connection failed: %s", e)
            return False

    def close(self) -> None:
        self.engine.dispose()
