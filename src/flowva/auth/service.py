# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from flowva.auth.passwords import burn_verification, hash_password, needs_rehash, verify_password
from flowva.auth.session import TokenService
from flowva.errors import EmailAlreadyRegistered
from flowva.infra.user_repo import CredentialStore, UserRecord, normalize_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: dict
    token: str


class AuthService:
    """Sign-in, sign-up and reset-request on top of the credential store and token service.

    Sign-out has no server side: sessions are stateless, so the caller
    only drops the cookie.
    """

    def __init__(self, users: CredentialStore, tokens: TokenService) -> None:
        self.users = users
        self.tokens = tokens

    def _issue(self, user: UserRecord) -> AuthResult:
        return AuthResult(user=user.public(), token=self.tokens.issue(user.id))

    def sign_in(self, email: str, password: str) -> Optional[AuthResult]:
        e = normalize_email(email)
        user = self.users.get_by_email(e)
        if user is None:
            burn_verification(password)
            logger.info("Sign-in rejected: unknown email")
            return None
        if not verify_password(user.password_hash, password):
            logger.info("Sign-in rejected: bad password for user %s", user.id)
            return None
        if needs_rehash(user.password_hash):
            self.users.update_password_hash(user.id, hash_password(password))
        return self._issue(user)

    def sign_up(self, email: str, password: str) -> Optional[AuthResult]:
        e = normalize_email(email)
        if self.users.get_by_email(e) is not None:
            logger.info("Sign-up rejected: email already registered")
            return None
        try:
            user = self.users.create(e, hash_password(password), name=e.split("@")[0] or None)
        except EmailAlreadyRegistered:
            logger.info("Sign-up rejected: concurrent registration of the same email")
            return None
        return self._issue(user)

    def reset_password(self, email: str) -> bool:
        # Delivery of reset instructions is not implemented; this only reports whether the account exists.
        return self.users.get_by_email(email) is not None

    def user_for_token(self, token: str) -> Optional[UserRecord]:
        sess = self.tokens.verify(token)
        if not sess:
            return None
        return self.users.get_by_id(sess.user_id)
