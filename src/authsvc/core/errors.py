# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the stores, the auth service and the HTTP layer.

Every error carries the HTTP status the transport layer answers with and a
message that is safe to show to the caller.
"""

from __future__ import annotations


class AuthError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateUsername(AuthError):
    status_code = 409
    default_message = "Username already exists"


class DuplicateEmail(AuthError):
    status_code = 409
    default_message = "Email already exists"


class InvalidCredentials(AuthError):
    status_code = 401
    default_message = "Invalid credentials"


class Unauthorized(AuthError):
    status_code = 401
    default_message = "Unauthorized"


class UserNotFound(AuthError):
    status_code = 404
    default_message = "User not found"


class InternalError(AuthError):
    status_code = 500
    default_message = "Internal server error"
