"""
Authentication Routes

POST  /auth/register   - Register new user, returns token
POST  /auth/login      - Login and get JWT token
PATCH /auth/updateUser - Update own profile, returns a fresh token
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import auth_rate_limit, get_auth_service, require_writable_user
from app.schemas.schemas import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UpdateUserRequest,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_rate_limit)],
)
def register(request: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new user account.

    Include the returned token in requests: Authorization: Bearer <token>
    """
    return auth.register(request.name, request.email, request.password)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(auth_rate_limit)])
def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Login and receive JWT access token."""
    return auth.login(request.email, request.password)


@router.patch("/updateUser", response_model=AuthResponse)
def update_user(
    request: UpdateUserRequest,
    user: CurrentUser = Depends(require_writable_user),
    auth: AuthService = Depends(get_auth_service),
):
    """Update name/email (and optionally password) of the current user."""
    return auth.update_user(user.user_id, request.name, request.email, request.password)
