# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from flowva.infra.db import Database
from flowva.infra.models import OnboardingData


@dataclass(frozen=True)
class OnboardingAnswers:
    use_case: str
    categories: List[str] = field(default_factory=list)
    tools: List[str] = field(default_factory=list)
    name: Optional[str] = None


@dataclass(frozen=True)
class OnboardingRecord:
    user_id: str
    use_case: str
    categories: List[str]
    tools: List[str]
    name: Optional[str]
    completed: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "useCase": self.use_case,
            "categories": list(self.categories),
            "tools": list(self.tools),
            "name": self.name,
            "completed": self.completed,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


def _to_record(row: OnboardingData) -> OnboardingRecord:
    return OnboardingRecord(
        user_id=row.user_id,
        use_case=row.use_case,
        categories=list(row.categories or []),
        tools=list(row.tools or []),
        name=row.name,
        completed=bool(row.completed),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _find(s: Session, user_id: str) -> Optional[OnboardingData]:
    return s.execute(select(OnboardingData).where(OnboardingData.user_id == user_id)).scalar_one_or_none()


def _apply(row: OnboardingData, answers: OnboardingAnswers) -> OnboardingData:
    row.use_case = answers.use_case
    row.categories = list(answers.categories)
    row.tools = list(answers.tools)
    row.name = answers.name
    row.completed = True
    return row


class OnboardingStore:
    """One onboarding record per user; every submission replaces the previous one."""

    def __init__(self, database: Database) -> None:
        self._db = database

    def get(self, user_id: str) -> Optional[OnboardingRecord]:
        if not user_id:
            return None
        with self._db.session() as s:
            row = _find(s, user_id)
            return _to_record(row) if row else None

    def upsert(self, user_id: str, answers: OnboardingAnswers) -> OnboardingRecord:
        if not user_id:
            raise ValueError("user_id is required")
        with self._db.session() as s:
            row = _find(s, user_id)
            if row is None:
                row = _apply(OnboardingData(user_id=user_id), answers)
                s.add(row)
                try:
                    s.commit()
                except IntegrityError:
                    # Another submission for this user inserted first; overwrite it.
                    s.rollback()
                    row = _find(s, user_id)
                    if row is None:
                        raise
                    _apply(row, answers)
                    s.commit()
            else:
                _apply(row, answers)
                s.commit()
            s.refresh(row)
            return _to_record(row)
