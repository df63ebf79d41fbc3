"""Authentication endpoint (login by email).

POST /api/v1/auth/login resolves an email to a user and returns a
session token carrying the user's id and home org id. Exempt from the
token middleware.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from pydantic import BaseModel, field_validator

from src.gateway.middleware.auth import encode_token
from src.shared.errors import AuthenticationError, ServiceUnavailableError

if TYPE_CHECKING:
    from src.ports.user_store import UserStore

logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            msg = "Please enter a valid email address"
            raise ValueError(msg)
        return v


class LoginResponse(BaseModel):
    token: str
    user_id: str
    org_id: str


def create_auth_router(*, user_store: UserStore, ttl_seconds: int = 3600) -> APIRouter:
    """Create auth API router."""
    router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

    @router.post("/login", response_model=LoginResponse)
    async def login(body: LoginRequest, request: Request) -> LoginResponse:
        """Log in with an email address, return a session token."""
        secret: str = request.app.state.jwt_secret

        try:
            user = await user_store.get_by_email(body.email)
        except Exception as exc:
            logger.error("Login lookup failed: %s", exc)
            msg = "Database is temporarily unavailable"
            raise ServiceUnavailableError("database", msg) from exc

        if user is None:
            raise AuthenticationError("No user found with that email address")

        token = encode_token(
            user_id=user.id,
            org_id=user.org_id,
            secret=secret,
            ttl_seconds=ttl_seconds,
        )
        logger.info("User login: user_id=%s org_id=%s", user.id, user.org_id)
        return LoginResponse(token=token, user_id=str(user.id), org_id=str(user.org_id))

    return router
