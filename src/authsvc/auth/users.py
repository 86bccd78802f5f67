# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from authsvc.core.errors import DuplicateEmail, DuplicateUsername, InternalError, InvalidCredentials, UserNotFound

ID_BYTES = 16  # 128 bits -> 32 hex chars
MAX_ID_ATTEMPTS = 5


def generate_id() -> str:
    return secrets.token_hex(ID_BYTES)


@dataclass(frozen=True)
class UserRecord:
    id: str
    username: str
    email: str
    password_hash: str
    created_at: datetime

    def public_view(self) -> dict:
        """Fields safe to send to a client (never the password hash)."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "createdAt": self.created_at.isoformat(),
        }

    def __repr__(self) -> str:
        return f"UserRecord(id={self.id!r}, username={self.username!r}, email={self.email!r})"


class UserStore:
    """Process-lifetime registry of accounts.

    A single lock guards every read-check-write so the username/email
    uniqueness check and the insert happen as one step. Records are frozen;
    updates swap in a new record.
    """

    def __init__(self, *, id_factory: Callable[[], str] = generate_id) -> None:
        self._users: Dict[str, UserRecord] = {}
        self._lock = threading.Lock()
        self._id_factory = id_factory

    def _new_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in self._users:
                return candidate
        raise InternalError()

    def create(self, username: str, email: str, password_hash: str) -> UserRecord:
        with self._lock:
            # Username is checked before email on purpose: if both collide the caller sees the username.
            for u in self._users.values():
                if u.username == username:
                    raise DuplicateUsername()
            for u in self._users.values():
                if u.email == email:
                    raise DuplicateEmail()
            user = UserRecord(
                id=self._new_id(),
                username=username,
                email=email,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
            self._users[user.id] = user
            return user

    def find_by_username(self, username: str) -> Optional[UserRecord]:
        if not username:
            return None
        with self._lock:
            for u in self._users.values():
                if u.username == username:
                    return u
        return None

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        if not user_id:
            return None
        with self._lock:
            return self._users.get(user_id)

    def update_password_hash(
        self, user_id: str, new_hash: str, *, expected_hash: Optional[str] = None
    ) -> UserRecord:
        """Replace the stored hash.

        With ``expected_hash`` the update only applies if the stored hash is
        still the one the caller verified against; otherwise the current
        password is treated as wrong.
        """
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise UserNotFound()
            if expected_hash is not None and user.password_hash != expected_hash:
                raise InvalidCredentials("Invalid current password")
            updated = replace(user, password_hash=new_hash)
            self._users[user_id] = updated
            return updated

    def count(self) -> int:
        with self._lock:
            return len(self._users)
