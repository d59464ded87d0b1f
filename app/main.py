"""
Job Tracker API - Main Application

FastAPI backend with:
- PostgreSQL for user accounts (credentials)
- MongoDB for job application documents
- Redis for rate limit counters
- JWT bearer authentication

Run: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import redis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.errors import AppError, UnexpectedError
from app.core.logging_config import setup_logging
from app.db.mongodb import MongoDatabase
from app.db.postgres import PostgresDatabase
from app.schemas.schemas import HealthResponse

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route does not exist"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _describe_validation_error(error: dict) -> str:
    fields = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(fields)
    return f"{field}: {error['msg']}" if field else error["msg"]


def create_app(
    postgres: Optional[PostgresDatabase] = None,
    mongo: Optional[MongoDatabase] = None,
    redis_client: Optional[redis.Redis] = None,
) -> FastAPI:
    """
    Build the application.

    Store handles that are passed in are used as-is (tests pass in-memory
    ones). Missing handles are opened from settings at startup and closed at
    shutdown.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.json_logs)
        logger.info("Starting up Job Tracker API...")

        opened = []
        if postgres is None:
            app.state.postgres = PostgresDatabase.from_url(settings.postgres_url, echo=settings.debug)
            opened.append(app.state.postgres)
        else:
            app.state.postgres = postgres

        if mongo is None:
            app.state.mongo = MongoDatabase.from_uri(settings.mongodb_uri, settings.mongodb_db)
            opened.append(app.state.mongo)
        else:
            app.state.mongo = mongo

        if redis_client is None:
            app.state.redis = redis.Redis.from_url(settings.redis_url, decode_responses=True)
            opened.append(app.state.redis)
        else:
            app.state.redis = redis_client

        try:
            app.state.postgres.init_schema()
        except SQLAlchemyError as e:
            logger.warning("PostgreSQL schema initialization failed: %s", e)
        try:
            app.state.mongo.init_indexes()
        except PyMongoError as e:
            logger.warning("MongoDB index initialization failed: %s", e)

        yield

        logger.info("Shutting down Job Tracker API...")
        for handle in opened:
            handle.close()

    app = FastAPI(
        title="Job Tracker API",
        description="""
        Track your job applications.

        ## Features
        - **Authentication**: register/login with JWT bearer tokens
        - **Jobs**: create, list, filter, sort, paginate, update, delete
        - **Stats**: status breakdown and monthly application counts
        """,
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check(request: Request):
        """Report connectivity of both stores."""
        postgres_ok = request.app.state.postgres.ping()
        mongo_ok = request.app.state.mongo.ping()
        return HealthResponse(
            status="healthy" if postgres_ok and mongo_ok else "degraded",
            postgres="connected" if postgres_ok else "disconnected",
            mongodb="connected" if mongo_ok else "disconnected",
        )

    register_exception_handlers(app)
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {"message": ...} with a matching status."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = [_describe_validation_error(error) for error in exc.errors()]
        return _error(400, ", ".join(messages))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = ROUTE_NOT_FOUND if exc.status_code == 404 else str(exc.detail)
        return _error(exc.status_code, message)

    @app.exception_handler(PyMongoError)
    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: Exception):
        logger.exception(
            "Store error: %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        error = UnexpectedError()
        return _error(error.status_code, error.message)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception: %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        error = UnexpectedError()
        return _error(error.status_code, error.message)


app = create_app()
