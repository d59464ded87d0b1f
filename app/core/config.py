"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

import json
from functools import lru_cache
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL (users / credentials)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "jobs_user"
    postgres_password: str = "password"
    postgres_db: str = "jobs_db"

    # MongoDB (job documents)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "job_tracker"

    # Redis (rate limit counters)
    redis_url: str = "redis://localhost:6379/0"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 30
    bcrypt_rounds: int = 10

    # API
    api_prefix: str = "/api/v1"
    cors_origins: Union[List[str], str] = ["http://localhost:3000"]

    # Rate limiting on register/login
    auth_rate_limit_requests: int = 10
    auth_rate_limit_window_seconds: int = 15 * 60
    trust_proxy: bool = True

    # Shared read-only demo account (empty disables it)
    demo_user_email: str = ""

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # App
    debug: bool = False

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Accept a JSON list or a comma separated string."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("demo_user_email")
    @classmethod
    def normalize_demo_email(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
