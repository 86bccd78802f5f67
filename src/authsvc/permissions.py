# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from typing import Optional

from fastapi import Request

from authsvc.auth.session import COOKIE_NAME
from authsvc.services.auth_service import AuthService


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(COOKIE_NAME) or None


def auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def cookie_settings() -> dict:
    secure = os.getenv("AUTHSVC_COOKIE_SECURE", "false").lower() in {"1", "true", "yes", "y"}
    return {"httponly": True, "samesite": "lax", "secure": secure, "path": "/"}
