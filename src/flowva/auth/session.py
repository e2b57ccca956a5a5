# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from itsdangerous import BadData, URLSafeTimedSerializer

SESSION_SALT = "flowva.session.v1"


@dataclass(frozen=True)
class SessionData:
    user_id: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Stateless session tokens: the signature and the embedded expiry are the whole truth.

    Verification never touches storage, so it is safe to call from the
    request gate. There is no revocation; a token lives until the expiry
    written into it at issue time, whatever max_age is configured later.
    """

    def __init__(self, secret_key: str, *, max_age: int, salt: str = SESSION_SALT) -> None:
        if not secret_key:
            raise RuntimeError("Missing token signing secret")
        self.max_age = int(max_age)
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)

    def issue(self, user_id: str) -> str:
        if not user_id:
            raise ValueError("Cannot issue a token without a user id")
        return self._serializer.dumps({"u": str(user_id), "exp": int(time.time()) + self.max_age})

    def verify(self, token: str) -> Optional[SessionData]:
        if not token:
            return None
        try:
            data, issued_at = self._serializer.loads(token, return_timestamp=True)
        except BadData:
            return None
        if not isinstance(data, dict):
            return None
        u = str(data.get("u") or "").strip()
        exp = data.get("exp")
        if not u or not isinstance(exp, int):
            return None
        if time.time() > exp:
            return None
        return SessionData(
            user_id=u,
            issued_at=issued_at,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
