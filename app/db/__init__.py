"""
Database module - PostgreSQL (users) and MongoDB (jobs) handles.
"""
from app.db.mongodb import MongoDatabase
from app.db.postgres import PostgresDatabase, users_table

__all__ = [
    "MongoDatabase",
    "PostgresDatabase",
    "users_table",
]
