"""
Auth Service - registration, login, profile update and token verification.

Tokens are stateless JWTs carrying only the user id and display name
(plus a demo flag for the shared read-only account).
"""

import logging
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from app.core.auth import create_access_token, decode_token, hash_password, verify_password
from app.core.config import Settings
from app.core.errors import AuthenticationError, DuplicateError, ValidationError
from app.schemas.schemas import AuthResponse, CurrentUser, UserSummary
from app.services.user_service import UserService, normalize_email

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6

INVALID_CREDENTIALS = "Invalid credentials"


def _check_name(name: Optional[str], errors: List[str]) -> None:
    if not name or not name.strip():
        errors.append("Please provide name")
    elif not NAME_MIN_LENGTH <= len(name.strip()) <= NAME_MAX_LENGTH:
        errors.append(f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters")


def _check_email(email: Optional[str], errors: List[str]) -> None:
    if not email or not email.strip():
        errors.append("Please provide email")
        return
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        errors.append("Please provide a valid email")


def _check_password(password: Optional[str], errors: List[str]) -> None:
    if not password:
        errors.append("Please provide password")
    elif len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")


class AuthService:
    """
    Account operations over the credential store.

    Every validation failure is collected first and raised as one
    ValidationError so the client sees all problems at once.
    """

    def __init__(self, users: UserService, settings: Settings):
        self.users = users
        self.settings = settings

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> AuthResponse:
        errors: List[str] = []
        _check_name(name, errors)
        _check_email(email, errors)
        _check_password(password, errors)
        if errors:
            raise ValidationError(errors)

        if self.users.email_taken(email):
            raise DuplicateError("email")

        user = self.users.create(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
        )
        logger.info("New user registered: %s (user_id: %s)", user["email"], user["user_id"])
        return self._issue(user)

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResponse:
        if not email or not email.strip() or not password:
            raise ValidationError(["Please provide email and password"])

        user = self.users.get_by_email(email)
        # Same error for unknown email and wrong password
        if not user or not verify_password(password, user["password_hash"]):
            logger.info("Failed login for %s", normalize_email(email))
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("User logged in: %s", user["email"])
        return self._issue(user)

    def update_user(
        self,
        user_id: int,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str] = None,
    ) -> AuthResponse:
        errors: List[str] = []
        _check_name(name, errors)
        _check_email(email, errors)
        if password is not None:
            _check_password(password, errors)
        if errors:
            raise ValidationError(errors)

        if self.users.email_taken(email, exclude_user_id=user_id):
            raise DuplicateError("email")

        values = {"name": name.strip(), "email": email}
        if password:
            values["password_hash"] = hash_password(password)

        user = self.users.update(user_id, **values)
        if user is None:
            raise AuthenticationError()

        logger.info("User %s updated profile (password changed: %s)", user_id, bool(password))
        return self._issue(user)

    def verify_token(self, token: Optional[str]) -> CurrentUser:
        if not token:
            raise AuthenticationError()

        payload = decode_token(token)
        if not payload:
            raise AuthenticationError()

        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise AuthenticationError()

        return CurrentUser(
            user_id=user_id,
            name=str(payload.get("name", "")),
            is_demo=bool(payload.get("demo", False)),
        )

    def is_demo_email(self, email: str) -> bool:
        demo = self.settings.demo_user_email
        return bool(demo) and normalize_email(email) == demo

    def _issue(self, user: dict) -> AuthResponse:
        claims = {"sub": str(user["user_id"]), "name": user["name"]}
        if self.is_demo_email(user["email"]):
            claims["demo"] = True
        return AuthResponse(
            user=UserSummary(id=user["user_id"], name=user["name"], email=user["email"]),
            token=create_access_token(data=claims),
        )
