# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication building blocks.

This package provides:
- Password hashing/verification (argon2)
- In-memory user store with username/email uniqueness
- Signed session cookies (itsdangerous) with server-side revocation
"""
