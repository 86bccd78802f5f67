# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as BodyValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from authsvc import __version__
from authsvc.auth.session import COOKIE_NAME, SessionStore
from authsvc.auth.users import UserStore
from authsvc.core.errors import AuthError, InternalError, ValidationError
from authsvc.core.responses import fail, ok
from authsvc.core.schemas import ChangePasswordRequest, LoginRequest, RegisterRequest
from authsvc.permissions import auth_service, cookie_settings, session_token
from authsvc.services.auth_service import AuthService

logger = logging.getLogger(__name__)

_HTTP_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def _register_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def _auth_error(request: Request, exc: AuthError):
        return fail(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError):
        logger.debug("Rejected body on %s: %s", request.url.path, exc.errors())
        return fail(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        message = _HTTP_MESSAGES.get(exc.status_code) or str(exc.detail or "Error")
        return fail(exc.status_code, message)

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.error("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path)
        return fail(500, InternalError.default_message)

    @app.middleware("http")
    async def _request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        logger.debug("%s %s -> %s (%.3fs)", request.method, request.url.path, response.status_code, elapsed)
        return response


async def _read_body(request: Request, model):
    try:
        return model.model_validate(await request.json())
    except (ValueError, BodyValidationError) as exc:
        logger.debug("Rejected body on %s: %s", request.url.path, type(exc).__name__)
        raise ValidationError("Invalid request body") from exc


def _register_routes(app: FastAPI) -> None:
    @app.post("/api/register")
    def register(body: RegisterRequest, service: AuthService = Depends(auth_service)):
        data = service.register(body.username, body.email, body.password)
        return ok(
            "User registered successfully. Please login with your credentials.",
            data,
            status_code=201,
        )

    @app.post("/api/login")
    def login(
        body: LoginRequest,
        previous: Optional[str] = Depends(session_token),
        service: AuthService = Depends(auth_service),
    ):
        user, token = service.login(body.username, body.password, previous_token=previous)
        resp = ok("Login successful", user)
        resp.set_cookie(COOKIE_NAME, token, max_age=service.sessions.max_age, **cookie_settings())
        return resp

    @app.post("/api/logout")
    def logout(
        token: Optional[str] = Depends(session_token),
        service: AuthService = Depends(auth_service),
    ):
        service.logout(token)
        resp = ok("Logged out successfully")
        resp.delete_cookie(COOKIE_NAME, **cookie_settings())
        return resp

    @app.get("/api/profile")
    def profile(
        token: Optional[str] = Depends(session_token),
        service: AuthService = Depends(auth_service),
    ):
        return ok("Profile retrieved successfully", service.get_profile(token))

    @app.post("/api/change-password")
    async def change_password(
        request: Request,
        token: Optional[str] = Depends(session_token),
        service: AuthService = Depends(auth_service),
    ):
        # Session first: an anonymous caller gets 401 whatever the body holds.
        service.require_session(token)
        body = await _read_body(request, ChangePasswordRequest)
        await run_in_threadpool(
            service.change_password,
            token,
            body.current_password,
            body.new_password,
        )
        return ok("Password changed successfully")

    @app.get("/api/health")
    def health():
        return ok(
            "Server is healthy",
            {"timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"), "status": "running"},
        )


def create_app(
    *,
    users: Optional[UserStore] = None,
    sessions: Optional[SessionStore] = None,
    static_dir: Optional[str] = None,
) -> FastAPI:
    """Build the application with its own stores (fresh ones unless given)."""
    app = FastAPI(title="authsvc", version=__version__)
    app.state.auth = AuthService(users=users or UserStore(), sessions=sessions or SessionStore())

    _register_handlers(app)
    _register_routes(app)

    # Optional frontend; mounted last so the API routes take precedence.
    static_dir = static_dir or os.getenv("AUTHSVC_STATIC_DIR", "")
    if static_dir:
        static_path = Path(static_dir).resolve()
        if static_path.is_dir():
            app.mount("/", StaticFiles(directory=str(static_path), html=True), name="static")
        else:
            logger.warning("Static directory %s not found; frontend disabled", static_path)

    return app


app = create_app()
