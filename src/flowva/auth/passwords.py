# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

# Work factor is tunable per deployment; hashes made with older parameters
# are upgraded on the next successful sign-in (see needs_rehash).
_PH = PasswordHasher(
    time_cost=int(os.getenv("FLOWVA_ARGON2_TIME_COST", "3")),
    memory_cost=int(os.getenv("FLOWVA_ARGON2_MEMORY_COST", "65536")),
)

_DUMMY_HASH = ""


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(hash_value: str) -> bool:
    return _PH.check_needs_rehash(hash_value)


def burn_verification(plain: str) -> None:
    """Spend the same CPU as a real check when there is no hash to verify against."""
    global _DUMMY_HASH
    if not _DUMMY_HASH:
        _DUMMY_HASH = _PH.hash("flowva-dummy-password")
    verify_password(_DUMMY_HASH, plain or "x")
