# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from flowva.auth.session import SessionData, TokenService
from flowva.config import Settings

HOME_PATH = "/"
AUTH_API_PATH = "/api/auth"
PUBLIC_PATHS = {HOME_PATH, AUTH_API_PATH}
API_PREFIX = "/api/"


def is_public(path: str) -> bool:
    return path in PUBLIC_PATHS


def cookie_settings(settings: Settings) -> dict:
    return {"httponly": True, "samesite": "strict", "secure": settings.cookie_secure, "path": "/"}


def set_session_cookie(resp: Response, settings: Settings, token: str) -> Response:
    resp.set_cookie(settings.cookie_name, token, max_age=settings.session_max_age, **cookie_settings(settings))
    return resp


def clear_session_cookie(resp: Response, settings: Settings) -> Response:
    resp.delete_cookie(settings.cookie_name, **cookie_settings(settings))
    return resp


def unauthorized() -> JSONResponse:
    return JSONResponse({"success": False, "message": "Unauthorized"}, status_code=401)


def _deny(path: str) -> Response:
    # API paths answer 401, pages redirect to the sign-in page.
    if path.startswith(API_PREFIX):
        return unauthorized()
    return RedirectResponse(url=HOME_PATH, status_code=303)


def current_session(request: Request) -> Optional[SessionData]:
    return getattr(request.state, "session", None)


async def session_gate(request: Request, call_next, *, tokens: TokenService, settings: Settings):
    """Admit requests that carry a valid session token; signature and expiry only, no storage."""
    request.state.session = None
    path = request.url.path
    if is_public(path):
        return await call_next(request)

    token = request.cookies.get(settings.cookie_name, "")
    if not token:
        return _deny(path)

    sess = tokens.verify(token)
    if sess is None:
        return clear_session_cookie(_deny(path), settings)

    request.state.session = sess
    return await call_next(request)
