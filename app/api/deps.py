"""
FastAPI dependencies: store handles, services, authentication and rate limits.

Store handles live on app.state (opened in the lifespan of app.main), so a
test can build the app with its own handles.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import get_settings
from app.core.errors import ValidationError
from app.core.rate_limiter import AUTH_RATE_LIMIT_MESSAGE, RateLimiter, get_client_ip
from app.schemas.schemas import CurrentUser
from app.services.auth_service import AuthService
from app.services.job_service import JobService
from app.services.user_service import UserService

# Bearer token extractor; we raise our own 401 when the header is missing
bearer_scheme = HTTPBearer(auto_error=False)

DEMO_USER_MESSAGE = "Demo user. Read only!"


def get_auth_service(request: Request) -> AuthService:
    return AuthService(UserService(request.app.state.postgres), get_settings())


def get_job_service(request: Request) -> JobService:
    return JobService(request.app.state.mongo.get_collection("jobs"))


def get_rate_limiter(request: Request) -> RateLimiter:
    return RateLimiter(request.app.state.redis)


def auth_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    """Register and login share one budget per client address."""
    settings = get_settings()
    ip = get_client_ip(request, trust_proxy=settings.trust_proxy)
    limiter.check_rate_limit(
        key=f"auth:{ip}",
        max_requests=settings.auth_rate_limit_requests,
        window_seconds=settings.auth_rate_limit_window_seconds,
        error_message=AUTH_RATE_LIMIT_MESSAGE,
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> CurrentUser:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    token = credentials.credentials if credentials else None
    user = auth.verify_token(token)
    request.state.user = user
    return user


async def require_writable_user(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency - Reject the shared demo account on mutating routes."""
    if user.is_demo:
        raise ValidationError([DEMO_USER_MESSAGE])
    return user
