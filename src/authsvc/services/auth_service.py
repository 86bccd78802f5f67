# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Registration, login, logout, profile and password change.

The service owns no data: it coordinates the user store, the session store
and the password hasher. Every operation either returns its payload or raises
an ``AuthError`` subclass that the HTTP layer maps to a status code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from argon2.exceptions import HashingError

from authsvc.auth.passwords import burn_verify, hash_password, verify_password
from authsvc.auth.session import SessionStore, SessionValues
from authsvc.auth.users import UserRecord, UserStore
from authsvc.core.errors import InternalError, InvalidCredentials, Unauthorized, UserNotFound, ValidationError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _hash(plain: str) -> str:
    try:
        return hash_password(plain)
    except HashingError as exc:
        logger.error("Password hashing failed: %s", type(exc).__name__)
        raise InternalError() from exc


@dataclass
class AuthService:
    users: UserStore
    sessions: SessionStore

    def register(self, username: str, email: str, password: str) -> dict:
        if not username or not email or not password:
            raise ValidationError("Username, email, and password are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        # Hash before touching the store so the lock is only held for the uniqueness check.
        password_hash = _hash(password)
        user = self.users.create(username, email, password_hash)
        logger.info("User registered: %s", user.username)
        return {"username": user.username}

    def login(self, username: str, password: str, previous_token: Optional[str] = None) -> Tuple[dict, str]:
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self.users.find_by_username(username)
        if user is None:
            burn_verify(password)
            logger.warning("Login failed for %s", username)
            raise InvalidCredentials()
        if not verify_password(user.password_hash, password):
            logger.warning("Login failed for %s", username)
            raise InvalidCredentials()

        # A caller that logs in again drops whatever session it was carrying.
        if previous_token:
            self.sessions.invalidate(previous_token)
        token = self.sessions.create(SessionValues(user_id=user.id))
        logger.info("User logged in: %s", user.username)
        return user.public_view(), token

    def logout(self, token: Optional[str]) -> None:
        self.sessions.invalidate(token)

    def require_session(self, token: Optional[str]) -> str:
        values = self.sessions.get(token)
        if values is None or not values.user_id:
            raise Unauthorized()
        return values.user_id

    def _current_user(self, token: Optional[str]) -> UserRecord:
        user_id = self.require_session(token)
        user = self.users.find_by_id(user_id)
        if user is None:
            logger.warning("Session references unknown user id %s", user_id)
            raise UserNotFound()
        return user

    def get_profile(self, token: Optional[str]) -> dict:
        return self._current_user(token).public_view()

    def change_password(self, token: Optional[str], current_password: str, new_password: str) -> None:
        user_id = self.require_session(token)
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")

        user = self.users.find_by_id(user_id)
        if user is None:
            logger.warning("Session references unknown user id %s", user_id)
            raise UserNotFound()
        if not verify_password(user.password_hash, current_password):
            logger.warning("Password change rejected for %s: wrong current password", user.username)
            raise InvalidCredentials("Invalid current password")

        new_hash = _hash(new_password)
        # Only applies if nobody changed the hash since it was verified above.
        self.users.update_password_hash(user.id, new_hash, expected_hash=user.password_hash)
        logger.info("Password changed for %s", user.username)
