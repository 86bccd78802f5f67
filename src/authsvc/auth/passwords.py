# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

# Fixed cost parameters: roughly 30-60 ms per hash on commodity hardware.
TIME_COST = int(os.getenv("AUTHSVC_ARGON2_TIME_COST", "3"))
MEMORY_COST = int(os.getenv("AUTHSVC_ARGON2_MEMORY_COST", "65536"))  # KiB
PARALLELISM = int(os.getenv("AUTHSVC_ARGON2_PARALLELISM", "4"))

_PH = PasswordHasher(time_cost=TIME_COST, memory_cost=MEMORY_COST, parallelism=PARALLELISM)

_DUMMY_HASH: Optional[str] = None


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerifyMismatchError, InvalidHashError):
        return False


def burn_verify(plain: str) -> None:
    """Run a verification against a throwaway hash.

    Used when the account does not exist so the response takes about as long
    as a real password check.
    """
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = _PH.hash("authsvc-dummy-password")
    verify_password(_DUMMY_HASH, plain or "x")
