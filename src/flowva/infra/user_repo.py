# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from flowva.errors import EmailAlreadyRegistered
from flowva.infra.db import Database
from flowva.infra.models import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


@dataclass(frozen=True)
class UserRecord:
    id: str
    email: str
    name: Optional[str]
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def public(self) -> dict:
        """Projection safe to hand to clients (no hash)."""
        return {"id": self.id, "email": self.email, "name": self.name}


def _to_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        name=row.name,
        password_hash=row.password_hash,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class CredentialStore:
    def __init__(self, database: Database) -> None:
        self._db = database

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        e = normalize_email(email)
        if not e:
            return None
        with self._db.session() as s:
            row = s.execute(select(User).where(User.email == e)).scalar_one_or_none()
            return _to_record(row) if row else None

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        if not user_id:
            return None
        with self._db.session() as s:
            row = s.get(User, user_id)
            return _to_record(row) if row else None

    def create(self, email: str, password_hash: str, name: Optional[str] = None) -> UserRecord:
        """Insert a new user. The unique index on email settles concurrent duplicates."""
        e = normalize_email(email)
        if not e:
            raise ValueError("Email is required")
        if not password_hash:
            raise ValueError("Password hash is required")
        with self._db.session() as s:
            row = User(email=e, password_hash=password_hash, name=name)
            s.add(row)
            try:
                s.commit()
            except IntegrityError as exc:
                s.rollback()
                raise EmailAlreadyRegistered(e) from exc
            s.refresh(row)
            logger.info("Created user %s", row.id)
            return _to_record(row)

    def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        with self._db.session() as s:
            res = s.execute(update(User).where(User.id == user_id).values(password_hash=password_hash))
            s.commit()
            return res.rowcount > 0
