"""
MongoDB Connection Utility

MongoDB stores the job documents. Each document references its owner by the
PostgreSQL user_id, so every query can be scoped with a single field.

The client is created at startup and handed around explicitly.
"""

import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# Collection name constants (avoid typos)
COLLECTIONS = {
    "jobs": "jobs",
}


class MongoDatabase:
    """Owns the MongoClient (connection pooling handled internally by pymongo)."""

    def __init__(self, client: MongoClient, db_name: str):
        self.client = client
        self.db: Database = client[db_name]

    @classmethod
    def from_uri(cls, uri: str, db_name: str) -> "MongoDatabase":
        return cls(MongoClient(uri), db_name)

    def get_collection(self, name: str) -> Collection:
        return self.db[COLLECTIONS[name]]

    def init_indexes(self) -> None:
        """
        Create indexes for the owner-scoped queries.
        Call this once during app startup.
        """
        jobs = self.get_collection("jobs")

        # Every query filters by owner first
        jobs.create_index("created_by")
        # Default listing order and the monthly aggregation
        jobs.create_index([("created_by", ASCENDING), ("created_at", DESCENDING)])
        # Status filter and the status breakdown
        jobs.create_index([("created_by", ASCENDING), ("status", ASCENDING)])

        logger.info("MongoDB indexes created successfully")

    def ping(self) -> bool:
        """
        Test if MongoDB is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            # ping command checks connection
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error("MongoDB connection failed: %s", e)
            return False

    def close(self) -> None:
        self.client.close()
