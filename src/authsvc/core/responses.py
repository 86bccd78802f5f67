# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

_MISSING = object()


def envelope(success: bool, message: str, data: Any = _MISSING) -> dict:
    """Uniform API body: ``{success, message, data?}``; ``data`` is omitted when not given."""
    out: dict = {"success": bool(success), "message": message}
    if data is not _MISSING and data is not None:
        out["data"] = data
    return out


def ok(message: str, data: Any = _MISSING, *, status_code: int = 200) -> JSONResponse:
    return JSONResponse(envelope(True, message, data), status_code=status_code)


def fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(envelope(False, message), status_code=status_code)
