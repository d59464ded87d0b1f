"""
Job Tracker API
Keep track of the jobs you applied to.

Architecture:
- PostgreSQL: User accounts (name, email, password hash)
- MongoDB: Job application documents, owner-scoped
- Redis: Rate limit counters for register/login
"""

__version__ = "1.0.0"
