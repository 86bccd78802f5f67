# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

COOKIE_NAME = os.getenv("AUTHSVC_COOKIE_NAME", "user-session")
DEFAULT_MAX_AGE_SECONDS = int(os.getenv("AUTHSVC_SESSION_MAX_AGE", "86400"))  # 24 hours


def _serializer() -> URLSafeTimedSerializer:
    secret = os.getenv("SECRET_KEY") or os.getenv("AUTHSVC_SECRET_KEY")
    if not secret:
        raise RuntimeError("Missing SECRET_KEY (or AUTHSVC_SECRET_KEY) in environment")
    salt = os.getenv("AUTHSVC_SESSION_SALT", "authsvc.session.v1")
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)


@dataclass(frozen=True)
class SessionValues:
    user_id: str


class SessionStore:
    """Signed cookie sessions.

    The token is an itsdangerous payload ``{"sid": ..., "uid": ...}``; any
    tampering breaks the signature. The store also remembers which session ids
    are live so that ``invalidate`` revokes a token even if the client keeps
    sending it.
    """

    def __init__(
        self,
        *,
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
        serializer: Optional[URLSafeTimedSerializer] = None,
    ) -> None:
        self.max_age = max_age
        self._serializer = serializer
        self._live: Dict[str, float] = {}
        self._lock = threading.Lock()

    @property
    def serializer(self) -> URLSafeTimedSerializer:
        # Resolved lazily so the secret is only required once sessions are used.
        if self._serializer is None:
            self._serializer = _serializer()
        return self._serializer

    def _prune(self, now: float) -> None:
        cutoff = now - self.max_age
        for sid in [s for s, issued in self._live.items() if issued < cutoff]:
            del self._live[sid]

    def create(self, values: SessionValues) -> str:
        sid = secrets.token_urlsafe(16)
        now = time.time()
        with self._lock:
            self._prune(now)
            self._live[sid] = now
        return self.serializer.dumps({"sid": sid, "uid": values.user_id})

    def _load(self, token: Optional[str]) -> Optional[dict]:
        if not token:
            return None
        try:
            data = self.serializer.loads(token, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            return None
        return data if isinstance(data, dict) else None

    def get(self, token: Optional[str]) -> Optional[SessionValues]:
        data = self._load(token)
        if not data:
            return None
        sid = str(data.get("sid") or "")
        with self._lock:
            if sid not in self._live:
                return None
        uid = str(data.get("uid") or "").strip()
        if not uid:
            return None
        return SessionValues(user_id=uid)

    def invalidate(self, token: Optional[str]) -> None:
        data = self._load(token)
        if not data:
            return
        with self._lock:
            self._live.pop(str(data.get("sid") or ""), None)

    def active_count(self) -> int:
        with self._lock:
            return len(self._live)
