# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import re
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError, field_validator

from flowva.core.catalog import CATALOG
from flowva.errors import InputError
from flowva.infra.user_repo import normalize_email

_EMAIL = TypeAdapter(EmailStr)


def check_email(raw: Any) -> str:
    e = normalize_email(raw if isinstance(raw, str) else "")
    if not e:
        raise InputError("email", "Please enter a valid email address")
    try:
        return normalize_email(_EMAIL.validate_python(e))
    except ValidationError as exc:
        raise InputError("email", "Please enter a valid email address") from exc


def check_password(raw: Any) -> str:
    if not isinstance(raw, str) or not raw:
        raise InputError("password", "Password is required")
    return raw


def check_new_password(raw: Any) -> str:
    pw = check_password(raw)
    if len(pw) < 8:
        raise InputError("password", "Password must be at least 8 characters")
    if not re.search(r"[A-Z]", pw):
        raise InputError("password", "Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", pw):
        raise InputError("password", "Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", pw):
        raise InputError("password", "Password must contain at least one number")
    return pw


def _dedupe(values: List[str]) -> List[str]:
    out: List[str] = []
    for v in values:
        s = str(v or "").strip()
        if s and s not in out:
            out.append(s)
    return out


class AuthRequest(BaseModel):
    action: str = ""
    email: Optional[str] = None
    password: Optional[str] = None


class OnboardingPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    use_case: Literal["track-tools", "organize-work", "discover-tools", "earn-rewards"] = Field(alias="useCase")
    categories: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    name: Optional[str] = None

    @field_validator("categories")
    @classmethod
    def _known_categories(cls, v: List[str]) -> List[str]:
        cats = _dedupe(v)
        unknown = [c for c in cats if not CATALOG.has_category(c)]
        if unknown:
            raise ValueError(f"Unknown category: {unknown[0]}")
        return cats

    @field_validator("tools")
    @classmethod
    def _clean_tools(cls, v: List[str]) -> List[str]:
        return _dedupe(v)

    @field_validator("name")
    @classmethod
    def _clean_name(cls, v: Optional[str]) -> Optional[str]:
        s = (v or "").strip()
        return s or None


def parse(model: type, payload: Any):
    """Validate a JSON body into `model`, reporting the first failing field as InputError."""
    if not isinstance(payload, dict):
        raise InputError("body", "Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        err = exc.errors()[0]
        loc = err.get("loc") or ("body",)
        msg = str(err.get("msg") or "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        raise InputError(str(loc[0]), msg) from exc
