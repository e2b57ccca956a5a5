# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SEVEN_DAYS = 7 * 24 * 60 * 60
TRUTHY = {"1", "true", "yes", "y"}


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    env: str
    secret_key: str
    database_url: str
    session_max_age: int = SEVEN_DAYS
    cookie_name: str = "token"
    cookie_secure: bool = False

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        env = (os.getenv("FLOWVA_ENV") or "development").strip().lower()

        secret = os.getenv("FLOWVA_SECRET_KEY") or os.getenv("SECRET_KEY") or ""
        if not secret:
            if env == "production":
                raise RuntimeError("Missing FLOWVA_SECRET_KEY (or SECRET_KEY) in production environment")
            # Sessions do not survive a restart with an ephemeral secret.
            secret = secrets.token_urlsafe(32)
            logger.warning("FLOWVA_SECRET_KEY is not set; using an ephemeral secret for this process")

        database_url = (
            os.getenv("FLOWVA_DATABASE_URL")
            or os.getenv("DATABASE_URL")
            or "sqlite:///./data/flowva.db"
        )

        return cls(
            env=env,
            secret_key=secret,
            database_url=database_url,
            session_max_age=int(os.getenv("FLOWVA_SESSION_MAX_AGE", str(SEVEN_DAYS))),
            cookie_name=os.getenv("FLOWVA_COOKIE_NAME", "token"),
            cookie_secure=_flag("FLOWVA_COOKIE_SECURE", env == "production"),
        )
