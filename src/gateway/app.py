"""FastAPI application factory.

- User API: /api/v1/* (token required)
- Login:    /api/v1/auth/login (exempt)
- healthz, readyz, metrics, docs: exempt from auth

The auth middleware resolves the caller to (user_id, org_id) on
request.state; route handlers consult AuthorizationGate per operation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from src.gateway.metrics.authz import MALFORMED_TREE_TOTAL
from src.gateway.middleware.auth import authenticate_header
from src.shared.errors import (
    AuthenticationError,
    AuthorizationError,
    InvalidActionError,
    MalformedTreeError,
    NorthstarError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from src.shared.logging.error_handler import log_structured_error

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

logger = logging.getLogger(__name__)

_EXEMPT_PATHS = frozenset(
    {
        "/healthz",
        "/readyz",
        "/metrics",
        "/docs",
        "/openapi.json",
        "/redoc",
        "/api/v1/auth/login",
    }
)

# Denials never reveal org topology or resource existence to the client.
_DENIED_MESSAGE = "You are not permitted to perform this action"


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "message": message})


def create_app(
    *,
    jwt_secret: str | None = None,
    cors_origins: list[str] | None = None,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
    readiness_check: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        jwt_secret: Token signing secret. Falls back to JWT_SECRET_KEY env var.
        cors_origins: Allowed CORS origins.
        lifespan: Async context manager factory for startup/shutdown.
        readiness_check: Awaited by /readyz; raises ServiceUnavailableError
            when a backing service is down.

    Returns:
        App with auth middleware, error handlers and system routes.
        Feature routers are mounted by the composition root.
    """
    secret = jwt_secret or os.environ.get("JWT_SECRET_KEY", "")
    if not secret:
        msg = "JWT_SECRET_KEY must be provided via argument or environment variable"
        raise ValueError(msg)

    app = FastAPI(
        title="Northstar API",
        description="Goal tracking across an organization hierarchy",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.jwt_secret = secret

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE"],
            allow_headers=["Authorization", "Content-Type"],
        )

    # -- Error handlers --

    @app.exception_handler(AuthenticationError)
    async def _auth_error(_: Request, exc: AuthenticationError) -> JSONResponse:
        return _error(401, exc.code, str(exc))

    @app.exception_handler(AuthorizationError)
    async def _authz_error(_: Request, exc: AuthorizationError) -> JSONResponse:
        return _error(403, exc.code, _DENIED_MESSAGE)

    @app.exception_handler(NotFoundError)
    async def _not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, exc.code, str(exc))

    @app.exception_handler(ValidationError)
    async def _validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return _error(422, exc.code, str(exc))

    @app.exception_handler(InvalidActionError)
    async def _invalid_action(_: Request, exc: InvalidActionError) -> JSONResponse:
        return _error(422, exc.code, str(exc))

    @app.exception_handler(MalformedTreeError)
    async def _malformed_tree(request: Request, exc: MalformedTreeError) -> JSONResponse:
        MALFORMED_TREE_TOTAL.inc()
        log_structured_error(
            logger,
            exc,
            context={"path": request.url.path, "org_id": exc.org_id},
        )
        return _error(500, exc.code, "Organization hierarchy is inconsistent")

    @app.exception_handler(ServiceUnavailableError)
    async def _service_unavailable(_: Request, exc: ServiceUnavailableError) -> JSONResponse:
        return _error(503, exc.code, str(exc))

    @app.exception_handler(NorthstarError)
    async def _northstar_error(request: Request, exc: NorthstarError) -> JSONResponse:
        log_structured_error(logger, exc, context={"path": request.url.path})
        return _error(500, exc.code, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        code_map = {
            404: "NOT_FOUND",
            405: "METHOD_NOT_ALLOWED",
        }
        return _error(
            exc.status_code,
            code_map.get(exc.status_code, "HTTP_ERROR"),
            exc.detail or f"HTTP {exc.status_code}",
        )

    # -- Auth middleware --

    @app.middleware("http")
    async def token_auth_middleware(request: Request, call_next: Any) -> Response:
        path = request.url.path

        if request.method == "OPTIONS" or path in _EXEMPT_PATHS:
            return await call_next(request)

        # Unknown paths fall through to 404 instead of 401
        route_matched = any(route.matches(request.scope)[0] != Match.NONE for route in app.routes)
        if not route_matched:
            return await call_next(request)

        try:
            payload = authenticate_header(request.headers.get("authorization"), secret=secret)
        except AuthenticationError as exc:
            return _error(401, exc.code, str(exc))

        request.state.user_id = payload.user_id
        request.state.org_id = payload.org_id
        return await call_next(request)

    # -- System routes --

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/readyz", tags=["system"])
    async def readyz() -> dict[str, str]:
        if readiness_check is not None:
            await readiness_check()
        return {"status": "ready"}

    @app.get("/metrics", tags=["system"], include_in_schema=False)
    async def metrics() -> Response:
        from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/api/v1/me", tags=["user"])
    async def get_me(request: Request) -> dict[str, str]:
        """Return the authenticated caller's identity."""
        return {
            "user_id": str(request.state.user_id),
            "org_id": str(request.state.org_id),
        }

    return app
