# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2)
- Signed, time-limited session tokens (itsdangerous)
- The sign-in / sign-up / reset orchestration used by the API
"""
